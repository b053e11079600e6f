"""Default turn pipeline."""

from importlib import resources
from pathlib import Path

from turnengine.core.pipeline import Pipeline


def create_default_pipeline() -> Pipeline:
    """
    Create the default turn pipeline.

    Loads ``default_pipeline.yml`` shipped with the package:
    advance_clock → lifecycle → social → affection → ransom → morale →
    intrigue → economy.

    Users can modify the result with insert_after(), remove() and replace(),
    or build their own from a YAML file with Pipeline.from_yaml().
    """
    traversable = resources.files("turnengine") / "default_pipeline.yml"
    with resources.as_file(traversable) as yaml_fs_path:
        return Pipeline.from_yaml(Path(yaml_fs_path))
