# encoding: utf-8
from typing import List, Type

from pydantic import create_model

from sonarrform.diagnostics import Diagnostics, Kind
from sonarrform.engine import ListDataSource, LookupDataSource, Resource
from sonarrform.gpi.item import ProviderItem


class ProviderItemResource(Resource):
    """
    Resource for one member of a generic-item family.

    Everything type specific comes from the record class: its constants are
    injected on the way out, its slots select what comes back.
    """

    import_by = "name"

    def __init__(self, model: Type[ProviderItem], path: str):
        super().__init__()
        self.model = model
        self.path = path
        self.type_suffix = model.type_suffix
        self.sensitive = model.sensitive
        self.normalised = model.normalised
        self.requires_replace = model.requires_replace
        self.deprecated_aliases = model.deprecated_aliases

    def build_wire(self, item: ProviderItem) -> dict:
        return item.to_generic().encode()

    def apply_wire(self, wire: dict) -> ProviderItem:
        return self.model.from_generic(self.model.generic.decode(wire))

    def check_wire(self, wire: dict, diagnostics: Diagnostics):
        expected = self.model.implementation_name
        found = wire.get("implementation")

        if expected is not None and found not in (None, expected):
            diagnostics.add_warning(
                Kind.IMPLEMENTATION_CHANGED,
                f"{self.type_name} {wire.get('id')} is a '{found}' on the server, "
                f"not a '{expected}'. Remove it from state and recreate it.",
            )


def family_types(record: Type[ProviderItem], implementations, path: str, plural: str):
    """
    Resources and data sources of one family.

    One resource for the family-level record, one per implementation, a data
    source looking an item up by name and one listing them all.
    """
    resources = [ProviderItemResource(model, path) for model in [record, *implementations]]

    list_model = create_model(f"{record.__name__}List", **{plural: (List[record], [])})
    lookup = ProviderItemResource(record, path)
    data_sources = [
        LookupDataSource(lookup, keys=("name",)),
        ListDataSource(lookup, plural, list_model),
    ]

    return resources, data_sources
