from importlib.metadata import version
from pathlib import Path

import tomli


def _get_project_version() -> str:
    toml_path = Path(__file__).parents[1].joinpath('pyproject.toml')
    if not toml_path.exists():
        # installed as a wheel
        return version('beacon-metrics')

    with toml_path.open(mode='rb') as pyproject:
        return tomli.load(pyproject)['project']['version']


__version__ = _get_project_version()
