"""Control state - reactive operator inputs bound to the control panel.

Wraps PlannerConfig with Solara reactivity.  Nested configuration leaves
are flattened into `<section>_<field>` reactive attributes (for example
`stall_width_m`, `scale_bar_angle`) so a generic form can render them.
"""

from datetime import date

import solara
from pydantic import BaseModel

from market_planner.schemas import PlannerConfig


class ControlState:
    """Reactive operator inputs.

    Besides the flattened config leaves it holds the inputs that are not
    part of a saved profile: placement mode, market date and search text.
    """

    def __init__(self, config: PlannerConfig | None = None):
        config = config or PlannerConfig()

        self.profile_name = solara.reactive(config.name)
        self.placement_mode = solara.reactive(False)
        self.market_date: solara.Reactive[date | None] = solara.reactive(None)
        self.search_query = solara.reactive("")

        self._field_names: list[str] = []
        self._create_reactive_fields(config)

    @property
    def field_names(self) -> list[str]:
        """Flattened names of every config-backed reactive."""
        return list(self._field_names)

    def _create_reactive_fields(self, config: PlannerConfig) -> None:
        """Create one reactive per leaf of each config section."""
        for section, _ in type(config).model_fields.items():
            value = getattr(config, section)
            if not isinstance(value, BaseModel):
                continue
            for name in type(value).model_fields:
                attr = f"{section}_{name}"
                setattr(self, attr, solara.reactive(getattr(value, name)))
                self._field_names.append(attr)

    def to_planner_config(self) -> PlannerConfig:
        """Convert reactive state to a validated PlannerConfig."""
        data: dict = {"name": self.profile_name.value}
        for section, field in PlannerConfig.model_fields.items():
            model_cls = field.annotation
            if not (isinstance(model_cls, type) and issubclass(model_cls, BaseModel)):
                continue
            section_data = {}
            for name, leaf in model_cls.model_fields.items():
                val = getattr(self, f"{section}_{name}").value
                # Inputs may hand back floats for int fields
                if leaf.annotation is int and val is not None:
                    try:
                        val = int(val)
                    except (ValueError, TypeError):
                        pass
                section_data[name] = val
            data[section] = section_data
        return PlannerConfig(**data)

    def from_planner_config(self, config: PlannerConfig) -> None:
        """Apply a PlannerConfig to the reactive state."""
        self.profile_name.value = config.name
        for section, _ in type(config).model_fields.items():
            value = getattr(config, section)
            if not isinstance(value, BaseModel):
                continue
            for name in type(value).model_fields:
                getattr(self, f"{section}_{name}").value = getattr(value, name)

    def reset(self) -> None:
        """Restore defaults and clear the session-only inputs."""
        self.from_planner_config(PlannerConfig())
        self.placement_mode.value = False
        self.market_date.value = None
        self.search_query.value = ""


# Singleton instance
control_state = ControlState()
