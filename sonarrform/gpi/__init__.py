# encoding: utf-8
"""Generic provider items: the field codec and the family projection layer."""

from sonarrform.gpi.fields import FieldKind, FieldRegistry
from sonarrform.gpi.item import GenericItem, ProviderItem, build_generic

__all__ = ["FieldKind", "FieldRegistry", "GenericItem", "ProviderItem", "build_generic"]
