"""Student Records admin app"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("student-records")
except PackageNotFoundError:
    __version__ = "dev"
