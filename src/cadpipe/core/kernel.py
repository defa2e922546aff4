"""
Geometry kernel handle.

Core owns the layers a pipeline run works on: the geometry layer, which
records the models that were inserted, and the validation layer, which
accumulates the issues found while inserting them.
"""

from typing import List, Optional
import logging

from cadpipe.core.validator import ModelValidator, ValidationConfig, ValidationIssue

logger = logging.getLogger(__name__)


class GeometryLayer:
    """Models known to the kernel."""

    def __init__(self):
        self._models: list = []

    def insert(self, model) -> None:
        if not any(existing is model for existing in self._models):
            self._models.append(model)

    def __contains__(self, model) -> bool:
        return any(existing is model for existing in self._models)

    def __len__(self) -> int:
        return len(self._models)


class ValidationLayer:
    """Accumulated validation issues."""

    def __init__(self, config: ValidationConfig):
        self.config = config
        self._issues: List[ValidationIssue] = []

    @property
    def issues(self) -> List[ValidationIssue]:
        return list(self._issues)

    def record(self, issues: List[ValidationIssue]) -> None:
        for issue in issues:
            logger.debug("Validation: %s", issue)
        self._issues.extend(issues)

    def take_errors(self) -> List[ValidationIssue]:
        """
        Remove all accumulated issues and return the ones that are errors.

        Issues that are not errors under the current configuration are
        logged and discarded.
        """
        issues, self._issues = self._issues, []

        errors = [issue for issue in issues if self.config.is_error(issue)]
        for issue in issues:
            if not self.config.is_error(issue):
                logger.info("Validation: %s", issue)

        return errors


class Layers:
    def __init__(self, validation_config: ValidationConfig):
        self.geometry = GeometryLayer()
        self.validation = ValidationLayer(validation_config)


class Core:
    """
    Handle to the geometry kernel.

    A Core may be reused for several models, but must not be used by more
    than one pipeline run at a time.

    Attributes:
        layers: Geometry and validation layers
        validator: Checks run on every inserted model
    """

    def __init__(self, validation_config: Optional[ValidationConfig] = None):
        config = validation_config or ValidationConfig()
        self.layers = Layers(config)
        self.validator = ModelValidator(config)

    @property
    def validation_config(self) -> ValidationConfig:
        return self.layers.validation.config

    def insert(self, model) -> None:
        """
        Register a model and validate it.

        Models that provide a ``validate(validator)`` method have the
        returned issues added to the validation layer. Inserting a model
        again validates it again.
        """
        self.layers.geometry.insert(model)

        validate = getattr(model, "validate", None)
        if validate is not None:
            self.layers.validation.record(validate(self.validator))

    def drain_validation_errors(self) -> List[ValidationIssue]:
        """Return the accumulated validation errors and clear the validation layer."""
        return self.layers.validation.take_errors()
