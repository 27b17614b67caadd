"""YAML persistence of resource identity.

A dumped resource keeps only its kind, path and host::

    kind: file
    path: /etc/hosts
    host: localhost

Loading gives back a :class:`ResourceDocument`; rebuilding a resource from
it (:meth:`FileSystem.load`) performs no I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from hexhost.kernel.domain.resource import ResourceDocument
from hexhost.kernel.exceptions import ValidationError

if TYPE_CHECKING:
    from hexhost.kernel.resources.base import FileSystemObject


def dump_resource(resource: FileSystemObject) -> str:
    """Render ``resource``'s identity as a YAML document."""
    return yaml.safe_dump(resource.to_document().model_dump(mode="json"), sort_keys=False)


def load_document(source: ResourceDocument | str | Mapping[str, Any]) -> ResourceDocument:
    """Parse a YAML string or mapping into a :class:`ResourceDocument`.

    Raises
    ------
    ValidationError
        If the YAML is malformed or the document has missing or unknown
        fields.
    """
    if isinstance(source, ResourceDocument):
        return source

    if isinstance(source, str):
        try:
            data = yaml.safe_load(source)
        except yaml.YAMLError as exc:
            raise ValidationError("document", f"invalid YAML: {exc}") from exc
    else:
        data = dict(source)

    if not isinstance(data, Mapping):
        raise ValidationError("document", "must be a mapping", data)

    try:
        return ResourceDocument.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError("document", str(exc), data) from exc


__all__ = ["dump_resource", "load_document"]
