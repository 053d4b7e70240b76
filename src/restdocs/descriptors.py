"""
Descriptors for documented request parameters and payload fields
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParameterDescriptor:
    """A documented path or query parameter"""
    name: str
    description: str
    optional: bool = False


@dataclass(frozen=True)
class FieldDescriptor:
    """A documented JSON payload field.

    ``path`` uses dotted keys, with ``[]`` standing for every element of an
    array: ``userId``, ``[]``, ``[].userId``. A subsection descriptor also
    documents everything nested below its path.
    """
    path: str
    description: str
    optional: bool = False
    subsection: bool = False

    def covers(self, path: str) -> bool:
        if path == self.path:
            return True
        if not self.subsection:
            return False
        return path.startswith(self.path + ".") or path.startswith(self.path + "[")


def parameter_with_name(name: str, description: str, optional: bool = False) -> ParameterDescriptor:
    return ParameterDescriptor(name=name, description=description, optional=optional)


def field_with_path(path: str, description: str, optional: bool = False) -> FieldDescriptor:
    return FieldDescriptor(path=path, description=description, optional=optional)


def subsection_with_path(path: str, description: str, optional: bool = False) -> FieldDescriptor:
    return FieldDescriptor(path=path, description=description, optional=optional, subsection=True)
