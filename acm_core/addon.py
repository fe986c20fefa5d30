"""Addon descriptor model shared with the host runtime.

The dictionaries produced by ``to_dict`` use the host's camelCase keys; they
are what the host receives in ``acm:addon_ready`` and ``acm:hud_addon``.
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from acm_core.errors import AddonManifestError


class AcmIcon(str, Enum):
    """Texture paths shipped with the host UI."""

    ACM = "textures/vxl/acm/icons/acm_icon"
    EXCLAIM = "textures/vxl/acm/icons/exclaim"
    LOGS = "textures/vxl/acm/icons/logs"
    MISSING = "textures/vxl/acm/icons/missing"
    QUESTION = "textures/vxl/acm/icons/question"
    RETURN = "textures/vxl/acm/icons/return"
    SETTINGS = "textures/vxl/acm/icons/settings"
    UNINSTALL = "textures/vxl/acm/icons/uninstall"


def _without_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass
class TextFieldWidget:
    label: str
    placeholder: str
    value: str | None = None

    def resolved_value(self) -> Any:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {"label": self.label, "placeholder": self.placeholder, "value": self.value}
        )


@dataclass
class DropdownWidget:
    label: str
    options: list[str]
    value_index: int | None = None
    value: str | None = None

    def resolved_value(self) -> Any:
        """Selected option when an index is set, otherwise the stored value."""

        if self.value_index is not None:
            in_range = 0 <= self.value_index < len(self.options)
            self.value = self.options[self.value_index] if in_range else None
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {
                "label": self.label,
                "options": list(self.options),
                "valueIndex": self.value_index,
                "value": self.value,
            }
        )


@dataclass
class SliderWidget:
    label: str
    min: float
    max: float
    step: float
    value: float | None = None

    def resolved_value(self) -> Any:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {
                "label": self.label,
                "min": self.min,
                "max": self.max,
                "step": self.step,
                "value": self.value,
            }
        )


@dataclass
class ToggleWidget:
    label: str
    value: bool | None = None

    def resolved_value(self) -> Any:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return _without_none({"label": self.label, "value": self.value})


SettingsWidget = Union[TextFieldWidget, DropdownWidget, SliderWidget, ToggleWidget]


def widget_from_dict(data: Mapping[str, Any]) -> SettingsWidget:
    """Pick the widget type from the keys present in ``data``."""

    label = data.get("label")
    if not isinstance(label, str):
        raise AddonManifestError("settings widget is missing 'label'")
    if "options" in data:
        index = data.get("valueIndex")
        return DropdownWidget(
            label=label,
            options=[str(option) for option in data.get("options") or []],
            value_index=int(index) if index is not None else None,
            value=data.get("value"),
        )
    if "min" in data and "max" in data:
        return SliderWidget(
            label=label,
            min=data["min"],
            max=data["max"],
            step=data.get("step", 1),
            value=data.get("value"),
        )
    if "placeholder" in data:
        return TextFieldWidget(
            label=label,
            placeholder=str(data["placeholder"]),
            value=data.get("value"),
        )
    return ToggleWidget(label=label, value=data.get("value"))


@dataclass
class SettingsCategory:
    title: str
    settings: list[SettingsWidget] = field(default_factory=list)
    icon_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {
                "title": self.title,
                "settings": [widget.to_dict() for widget in self.settings],
                "iconPath": self.icon_path,
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SettingsCategory":
        return cls(
            title=str(data["title"]),
            settings=[widget_from_dict(item) for item in data.get("settings") or []],
            icon_path=data.get("iconPath"),
        )


@dataclass(frozen=True)
class ExtensionData:
    id: str
    icon_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none({"id": self.id, "iconPath": self.icon_path})


@dataclass(frozen=True)
class AddonDescription:
    version: str
    author: str
    pack_id: str
    dependencies: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "version": self.version,
            "author": self.author,
            "packId": self.pack_id,
        }
        if self.dependencies:
            result["dependencies"] = list(self.dependencies)
        return result


@dataclass
class AddonData:
    """Metadata an addon registers with ``AddonLibrary.init_addon``."""

    format_version: str
    description: AddonDescription
    icon_path: str | None = None
    guide_keys: list[str] = field(default_factory=list)
    extensions: list[ExtensionData] = field(default_factory=list)
    settings: list[SettingsWidget] | list[SettingsCategory] = field(default_factory=list)

    @property
    def identifier(self) -> str:
        return f"{self.description.author}_{self.description.pack_id}"

    @property
    def has_setting_categories(self) -> bool:
        return bool(self.settings) and isinstance(self.settings[0], SettingsCategory)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "formatVersion": self.format_version,
            "description": self.description.to_dict(),
        }
        if self.icon_path is not None:
            result["iconPath"] = self.icon_path
        if self.guide_keys:
            result["guideKeys"] = list(self.guide_keys)
        if self.extensions:
            result["extensions"] = [extension.to_dict() for extension in self.extensions]
        if self.settings:
            result["settings"] = [item.to_dict() for item in self.settings]
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AddonData":
        description = data.get("description")
        if not isinstance(description, Mapping):
            raise AddonManifestError("missing or malformed 'description'")
        fields: dict[str, str] = {}
        for key in ("version", "author", "packId"):
            raw_value = description.get(key)
            if not isinstance(raw_value, str) or not raw_value.strip():
                raise AddonManifestError(f"'description.{key}' must be a non-empty string")
            fields[key] = raw_value.strip()

        raw_settings = data.get("settings") or []
        settings: list[Any]
        if raw_settings and isinstance(raw_settings[0], Mapping) and "title" in raw_settings[0]:
            settings = [SettingsCategory.from_dict(item) for item in raw_settings]
        else:
            settings = [widget_from_dict(item) for item in raw_settings]

        return cls(
            format_version=str(data.get("formatVersion") or "1.0.0"),
            description=AddonDescription(
                version=fields["version"],
                author=fields["author"],
                pack_id=fields["packId"],
                dependencies=tuple(str(dep) for dep in description.get("dependencies") or ()),
            ),
            icon_path=data.get("iconPath"),
            guide_keys=[str(key) for key in data.get("guideKeys") or []],
            extensions=[
                ExtensionData(id=str(item["id"]), icon_path=item.get("iconPath"))
                for item in data.get("extensions") or []
            ],
            settings=settings,
        )

    @classmethod
    def load(cls, path: Path | str) -> "AddonData":
        """Load a descriptor from a ``.json``, ``.yml``/``.yaml`` or ``.toml`` file."""

        path = Path(path)
        suffix = path.suffix.lower()
        try:
            if suffix == ".toml":
                with path.open("rb") as handle:
                    document = tomllib.load(handle)
            elif suffix in (".yml", ".yaml"):
                document = yaml.safe_load(path.read_text(encoding="utf-8"))
            else:
                document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise AddonManifestError(f"unable to read addon descriptor at {path}") from exc

        if not isinstance(document, Mapping):
            raise AddonManifestError(f"addon descriptor at {path} is not a mapping")
        return cls.from_dict(document)
