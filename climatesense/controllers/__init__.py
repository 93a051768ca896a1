"""ClimateSense workflow controllers."""

from controllers.design_controller import DesignController, ControllerRegistry

__all__ = ["DesignController", "ControllerRegistry"]
