"""TOML loading for rustsig.toml cheat sheets."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "rustsig.toml"


@dataclass
class RenderConfig:
    color: bool = True
    style: str = "default"


@dataclass
class ItemGroup:
    name: str = ""
    items: list[str] = field(default_factory=list)


@dataclass
class TypeSection:
    """One documented type: its header, optional where-clause and items."""

    type: str
    trait: bool = False
    constraints: str | None = None
    items: list[str] = field(default_factory=list)
    groups: list[ItemGroup] = field(default_factory=list)

    def all_items(self) -> list[str]:
        """Grouped items first, in file order, then ungrouped ones."""
        items = [item for group in self.groups for item in group.items]
        items.extend(self.items)
        return items


@dataclass
class CheatSheet:
    render: RenderConfig = field(default_factory=RenderConfig)
    types: list[TypeSection] = field(default_factory=list)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find rustsig.toml. Raises FileNotFoundError.

    A path naming a file is taken as the sheet itself.
    """
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        return path
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> CheatSheet:
    """Parse a cheat sheet file into a CheatSheet."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    sheet = CheatSheet()

    if "render" in data:
        rnd = data["render"]
        sheet.render = RenderConfig(
            color=rnd.get("color", True),
            style=rnd.get("style", "default"),
        )

    for entry in data.get("types", []):
        if "type" not in entry:
            raise ValueError(f"{path}: every [[types]] entry needs a 'type' key")
        sheet.types.append(
            TypeSection(
                type=entry["type"],
                trait=entry.get("trait", False),
                constraints=entry.get("constraints"),
                items=list(entry.get("items", [])),
                groups=[
                    ItemGroup(name=grp.get("name", ""), items=list(grp.get("items", [])))
                    for grp in entry.get("groups", [])
                ],
            )
        )

    return sheet
