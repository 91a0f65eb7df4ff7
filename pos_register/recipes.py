"""Component name -> menu item -> recipe lookup."""

from __future__ import annotations

from pos_register.errors import ComponentNotFound
from pos_register.models import ResolvedComponent
from pos_register.stores import CatalogStore


class RecipeResolver:
    """Resolve component names against a catalog. Pure reads, no caching."""

    def __init__(self, catalog: CatalogStore) -> None:
        self.catalog = catalog

    def resolve(self, component_name: str) -> ResolvedComponent:
        component = self.catalog.find_menu_component(component_name)
        if component is None:
            raise ComponentNotFound(component_name)
        entries = tuple(self.catalog.recipe_for(component.id))
        return ResolvedComponent(component=component, entries=entries)
