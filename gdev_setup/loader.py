"""Setup config loader and schema validation."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import yaml

from gdev_setup.exceptions import ValidationError, ConfigValidationError
from gdev_setup.plan import SetupPlan, StepDefinition


logger = logging.getLogger(__name__)

CONFIG_RELATIVE_PATH = Path('.gdev') / 'gdev.setup.yaml'


class SetupConfigLoader:
    """
    Loads and validates gdev.setup.yaml into a SetupPlan.

    Malformed entries and duplicate keys are errors; unknown fields are
    logged and ignored.
    """

    TOP_LEVEL_FIELDS = {'steps'}
    STEP_FIELDS = {'key', 'command', 'fixes', 'known-issues'}
    FIX_FIELDS = {'key', 'command'}
    KNOWN_ISSUE_FIELDS = {'key', 'problem', 'solution'}

    def __init__(self, project_path: Path):
        """Initialize loader with the project root."""
        self.project_path = project_path.resolve()
        self.errors: List[ValidationError] = []

    def default_config_path(self) -> Path:
        """Location of the config file inside the project."""
        return self.project_path / CONFIG_RELATIVE_PATH

    def load(self, config_path: Optional[Path] = None) -> SetupPlan:
        """Load and validate the setup config.

        Args:
            config_path: Explicit config file (default: <project>/.gdev/gdev.setup.yaml)

        Returns:
            The validated, immutable SetupPlan

        Raises:
            ConfigValidationError: If the file is unreadable or invalid
        """
        self.errors = []
        path = config_path or self.default_config_path()
        logger.debug(f"Loading setup config: {path}")

        try:
            with open(path, 'r') as f:
                config = yaml.safe_load(f)
        except FileNotFoundError:
            self._add_error(f"Config file not found: {path}", str(path))
            self._raise_validation_errors()
        except (OSError, yaml.YAMLError) as e:
            self._add_error(f"Failed to load config: {e}", str(path))
            self._raise_validation_errors()

        if config is None or not isinstance(config, dict):
            self._add_error("Config must be a YAML object/dictionary", str(path))
            self._raise_validation_errors()

        self._warn_unknown(config, self.TOP_LEVEL_FIELDS, "Config", str(path))

        # A config without steps is a valid no-op plan
        steps = config.get('steps')
        if steps is None:
            steps = []
        self._validate_steps(steps)

        if self.errors:
            self._raise_validation_errors()

        plan = SetupPlan(steps=tuple(StepDefinition.from_dict(step) for step in steps))
        logger.debug(f"Loaded {len(plan)} steps from {path}")
        return plan

    def _validate_steps(self, steps: Any):
        """Validate step definitions."""
        if not isinstance(steps, list):
            self._add_error("'steps' must be a list", 'steps')
            return

        step_keys: Set[str] = set()

        for i, step in enumerate(steps):
            path = f"steps[{i}]"
            if not isinstance(step, dict):
                self._add_error(f"Step {i} must be a dictionary", path)
                continue

            key = self._require_string(step, 'key', f"Step {i}", path)
            if key is None:
                key = f"<step_{i}>"
            elif key in step_keys:
                self._add_error(f"Duplicate step key '{key}'", path)
            else:
                step_keys.add(key)

            self._require_string(step, 'command', f"Step '{key}'", path)
            self._warn_unknown(step, self.STEP_FIELDS, f"Step '{key}'", path)

            if step.get('fixes') is not None:
                self._validate_fixes(step['fixes'], key, path)
            if step.get('known-issues') is not None:
                self._validate_known_issues(step['known-issues'], key, path)

    def _validate_fixes(self, fixes: Any, step_key: str, step_path: str):
        """Validate a step's fixes; keys must be unique within the step."""
        if not isinstance(fixes, list):
            self._add_error(f"Step '{step_key}': 'fixes' must be a list", f"{step_path}.fixes")
            return

        fix_keys: Set[str] = set()
        for i, fix in enumerate(fixes):
            path = f"{step_path}.fixes[{i}]"
            if not isinstance(fix, dict):
                self._add_error(f"Step '{step_key}': fix {i} must be a dictionary", path)
                continue

            key = self._require_string(fix, 'key', f"Step '{step_key}': fix {i}", path)
            if key is not None:
                if key in fix_keys:
                    self._add_error(f"Step '{step_key}': duplicate fix key '{key}'", path)
                fix_keys.add(key)
            label = f"Step '{step_key}': fix '{key or i}'"
            self._require_string(fix, 'command', label, path)
            self._warn_unknown(fix, self.FIX_FIELDS, label, path)

    def _validate_known_issues(self, known_issues: Any, step_key: str, step_path: str):
        """Validate a step's known issues."""
        if not isinstance(known_issues, list):
            self._add_error(
                f"Step '{step_key}': 'known-issues' must be a list", f"{step_path}.known-issues"
            )
            return

        for i, issue in enumerate(known_issues):
            path = f"{step_path}.known-issues[{i}]"
            if not isinstance(issue, dict):
                self._add_error(f"Step '{step_key}': known issue {i} must be a dictionary", path)
                continue

            label = f"Step '{step_key}': known issue {i}"
            for field_name in ('key', 'problem', 'solution'):
                self._require_string(issue, field_name, label, path)
            self._warn_unknown(issue, self.KNOWN_ISSUE_FIELDS, label, path)

    def _require_string(self, data: Dict[str, Any], field_name: str, label: str, path: str) -> Optional[str]:
        """Check that a required field is a non-empty string and return it."""
        value = data.get(field_name)
        if value is None or value == '':
            self._add_error(f"{label} missing required '{field_name}' field", path)
            return None
        if not isinstance(value, str):
            self._add_error(f"{label} '{field_name}' must be a string, got {type(value).__name__}", path)
            return None
        return value

    def _warn_unknown(self, data: Dict[str, Any], known: Set[str], label: str, path: str):
        """Unknown fields are ignored, but logged so typos are noticed."""
        for field_name in data.keys():
            if field_name not in known:
                logger.warning(f"{label}: ignoring unknown field '{field_name}' ({path})")

    def _add_error(self, message: str, path: str = ""):
        """Add validation error."""
        self.errors.append(ValidationError(message, path))

    def _raise_validation_errors(self):
        """Raise ConfigValidationError with accumulated errors."""
        raise ConfigValidationError(self.errors)
