import keyword
from typing import Dict, Iterator, List, Union

from .._config import ClientOptions
from ..models.discovery import ApiDescriptor, ResourceDescriptor
from ._base_service import BaseService
from ._method import ApiMethod

Member = Union["Resource", ApiMethod]


class Resource:
    """Namespace of API methods and nested resources.

    Members are looked up in a table built from the descriptor tree, by
    attribute or by item. Names that are Python keywords are also reachable
    with a trailing underscore (``files.import_``).
    """

    def __init__(
        self,
        descriptor: ResourceDescriptor,
        options: ClientOptions,
        service: BaseService,
    ) -> None:
        self._members: Dict[str, Member] = {}
        for name, child in descriptor.resources.items():
            self._members[name] = Resource(child, options, service)
        for name, method in descriptor.methods.items():
            self._members[name] = ApiMethod(method, options, service)

    def __getattr__(self, name: str) -> Member:
        members = self.__dict__.get("_members", {})
        if name in members:
            return members[name]
        if name.endswith("_") and keyword.iskeyword(name[:-1]) and name[:-1] in members:
            return members[name[:-1]]
        raise AttributeError(f"{type(self).__name__} has no member '{name}'")

    def __getitem__(self, name: str) -> Member:
        return self._members[name]

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._members))

    @property
    def methods(self) -> Dict[str, ApiMethod]:
        return {k: v for k, v in self._members.items() if isinstance(v, ApiMethod)}

    @property
    def resources(self) -> Dict[str, "Resource"]:
        return {k: v for k, v in self._members.items() if isinstance(v, Resource)}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} members={list(self._members)}>"


class Api(Resource):
    """Root namespace of one API, carrying its descriptor."""

    def __init__(
        self, descriptor: ApiDescriptor, options: ClientOptions, service: BaseService
    ) -> None:
        super().__init__(descriptor, options, service)
        self.descriptor = descriptor

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def version(self) -> str:
        return self.descriptor.version

    def method(self, method_id: str) -> ApiMethod:
        """Look up a method anywhere in the tree by its discovery id."""
        found = _find(self, method_id)
        if found is None:
            raise KeyError(f"No method '{method_id}' in {self.name} {self.version}")
        return found


def _find(resource: Resource, method_id: str):
    for member in resource._members.values():
        if isinstance(member, ApiMethod):
            if member.id == method_id:
                return member
        else:
            found = _find(member, method_id)
            if found is not None:
                return found
    return None
