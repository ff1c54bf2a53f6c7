import logging
import toml

from pydantic_settings import BaseSettings, SettingsConfigDict

from pathlib import Path

from pirwatch.common.pirwatch_logging import get_pirwatch_logger

logger: logging.Logger = get_pirwatch_logger(__name__)


class PirWatchBaseSettings(BaseSettings):
    model_config = SettingsConfigDict(arbitrary_types_allowed=True,
                                      populate_by_name=True,
                                      frozen=True)

    @classmethod
    def from_toml(cls, config_file: str | Path, **overrides):
        """
        Loads the settings from a toml file. Environment variables are still read and keyword overrides take
        precedence over both.
        """
        if isinstance(config_file, str):
            config_file = Path(config_file)

        if not config_file.exists() or not config_file.is_file():
            raise FileNotFoundError(f'File {config_file}')

        with config_file.open('r') as f:
            config_dict = toml.loads(f.read())
        logger.debug(f"Loaded settings from {config_file}: {list(config_dict)}")

        # Toml values only fill the fields neither the environment nor the overrides provide
        provided = cls(**overrides).model_fields_set
        file_values = {}
        for k, v in config_dict.items():
            field_name = cls._resolve_field_name(k)
            if field_name is not None and field_name not in provided:
                file_values[field_name] = v

        return cls(**{**file_values, **overrides})

    def __init__(self, **values):
        # Init arguments are passed by alias so they override the environment variables of the same field
        super().__init__(**self._to_aliases(values))

    @classmethod
    def _to_aliases(cls, values: dict) -> dict:
        aliased = {}
        for k, v in values.items():
            field = cls.model_fields.get(k)
            aliased[field.alias if field is not None and field.alias else k] = v
        return aliased

    @classmethod
    def _resolve_field_name(cls, key: str) -> str | None:
        for name, field in cls.model_fields.items():
            if key == name or (field.alias and key.upper() == field.alias.upper()):
                return name
        logger.warning(f"Unknown setting {key} ignored")
        return None
