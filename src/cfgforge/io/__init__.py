from cfgforge.io.artifact import (
    ArtifactOptions,
    find_depth,
    load_artifact,
    put_file,
    run_artifact,
    render_artifact,
    render_value,
    write_artifact,
)
from cfgforge.io.readers import FragmentReader, get_reader, read_fragment

__all__ = [
    "ArtifactOptions",
    "find_depth",
    "load_artifact",
    "put_file",
    "run_artifact",
    "render_artifact",
    "render_value",
    "write_artifact",
    "FragmentReader",
    "get_reader",
    "read_fragment",
]
