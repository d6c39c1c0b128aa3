# topomanifests

Helpers for the configuration and manifests of topology-aware scheduling
components: the scheduler plugin, its leader election settings and the
resource topology exporter.

## Installation

```
pip install topomanifests
```

Running the tests needs the `test` extra:

```
pip install "topomanifests[test]"
pytest
```

## Modules

- `topomanifests.schedparams` – decodes scheduler configuration YAML with
  `decode_scheduler_profiles_from_data`, returning one `ConfigParams` per
  profile that configures the `NodeResourceTopologyMatch` plugin (cache,
  scoring strategy and leader election settings). Malformed data is logged
  and yields the profiles decoded so far. `find_scheduler_profile_by_name`
  picks a profile by scheduler name. The `validate_*` functions check cache
  resync methods, foreign pods detection modes, informer modes and scoring
  strategy types. `new_config_cache_params` returns cache settings with
  their defaults filled in.
- `topomanifests.codec` – `serialize_object` and `serialize_object_to_data`
  write an object (a mapping, or anything with a `to_dict` method) as YAML,
  dropping `status` and creation timestamps; `deserialize_object_from_data`
  reads a YAML or JSON manifest back and requires `kind` and `apiVersion`;
  `render_objects` writes a list of objects as a multi-document YAML stream.
- `topomanifests.components` – validates component, sub-component and role
  names (`validate_component`, `validate_sub_component`,
  `validate_role_name`), builds manifest paths (`manifest_path`,
  `role_binding_file_name`) and makes ignition file entries embedding
  content as a base64 data URL (`ignition_file`).
- `topomanifests.sched` – scheduler defaults and
  `leader_election_params_from_opts`, which turns a `name` or
  `namespace/name` resource string into `LeaderElectionParams`.
- `topomanifests.rte` – `create_config_map`, which builds the ConfigMap
  holding the exporter configuration under the `config.yaml` key.

## Example

```python
from topomanifests.schedparams import (
    decode_scheduler_profiles_from_data,
    find_scheduler_profile_by_name,
)

with open("scheduler-config.yaml", "rb") as fh:
    profiles = decode_scheduler_profiles_from_data(fh.read())

params = find_scheduler_profile_by_name(profiles, "topology-aware-scheduler")
if params is not None:
    print(params.cache.resync_period_seconds)
```

```python
import sys

from topomanifests.codec import render_objects
from topomanifests.rte import create_config_map

cm = create_config_map("tas-rte", "rte-config", "resources: {}\n")
render_objects([cm], sys.stdout)
```

Invalid values raise exceptions: `SchedParamsError` for scheduler
parameters and `ManifestError` for unknown components or roles. Both are
subclasses of `ValueError`.

## What it does not do

The package ships no manifest YAML files and does not assemble the full
set of objects for the scheduler, the exporter or the topology updater;
`manifest_path` only computes where such a file would live. There is no
command-line tool, and nothing here talks to a cluster: it does not deploy,
remove, detect or validate anything on one.