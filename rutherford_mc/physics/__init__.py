"""Physics module: Rutherford single scattering."""

from rutherford_mc.physics.rutherford import RutherfordScattering, rutherford_angle

__all__ = ["RutherfordScattering", "rutherford_angle"]
