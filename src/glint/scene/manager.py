"""Scene manager for building the primitive table from Python.

The SceneManager is the Python-side view of the scene. It writes spheres and
the ground plane into the GPU primitive table and keeps a record of what was
added so the scene can be inspected or exported.

A scene holds any number of spheres (up to the table capacity) and exactly
one ground plane. The plane can be added at any point while building; a
second plane is rejected, and validate() reports a scene without one.

Light positions are not part of the primitive table. They are supplied
through RenderConfig.light_positions.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere(centre=(0, 0, -1), radius=0.5, colour=(0.8, 0.3, 0.3))
    >>> scene.set_ground_plane(point=(0, -0.5, 0), normal=(0, 1, 0))
    >>> scene.validate()
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from glint.scene.intersection import (
    MAX_PRIMITIVES,
    add_plane,
    add_sphere,
    clear_scene,
    get_primitive_count,
)

logger = logging.getLogger(__name__)

Vector3 = tuple[float, float, float]


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        index: The index in the primitive table.
        centre: The centre of the sphere.
        radius: The radius of the sphere.
        colour: The base colour of the sphere.
    """

    index: int
    centre: Vector3
    radius: float
    colour: Vector3


@dataclass
class PlaneInfo:
    """Information about the ground plane.

    Attributes:
        index: The index in the primitive table.
        point: A point on the plane.
        normal: The plane normal as given.
        colour: The base colour before the checker pattern.
    """

    index: int
    point: Vector3
    normal: Vector3
    colour: Vector3


@dataclass
class SceneConfig:
    """Plain-data description of a built scene.

    Attributes:
        spheres: List of sphere descriptions.
        plane: Ground plane description, or None if not set.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)
    plane: dict[str, Any] | None = None


class SceneManager:
    """Builds and tracks the scene's primitives.

    Creating a SceneManager clears the GPU primitive table, so only one
    manager should be in use at a time.

    Attributes:
        spheres: List of SphereInfo for all spheres in the scene.
        plane: PlaneInfo for the ground plane, or None until it is set.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []
        self.plane: PlaneInfo | None = None
        self.clear()

    def clear(self) -> None:
        """Remove all primitives from the scene."""
        clear_scene()
        self.spheres.clear()
        self.plane = None
        logger.debug("Scene cleared")

    def add_sphere(
        self,
        centre: Vector3,
        radius: float,
        colour: Vector3 = (1.0, 1.0, 1.0),
    ) -> int:
        """Add a sphere to the scene.

        Args:
            centre: The centre point as (x, y, z).
            radius: The radius (must be positive).
            colour: The base colour as (R, G, B).

        Returns:
            The table index of the sphere.

        Raises:
            ValueError: If the radius is not positive.
            RuntimeError: If the primitive table is full.
        """
        index = add_sphere(centre, radius, colour)
        self.spheres.append(
            SphereInfo(index=index, centre=tuple(centre), radius=radius, colour=tuple(colour))
        )
        return index

    def set_ground_plane(
        self,
        point: Vector3,
        normal: Vector3 = (0.0, 1.0, 0.0),
        colour: Vector3 = (1.0, 1.0, 1.0),
    ) -> int:
        """Add the scene's single ground plane.

        Args:
            point: A point on the plane as (x, y, z).
            normal: The plane normal (normalized on upload).
            colour: The base colour as (R, G, B).

        Returns:
            The table index of the plane.

        Raises:
            RuntimeError: If the scene already has a ground plane.
            ValueError: If the normal is zero-length.
        """
        if self.plane is not None:
            raise RuntimeError("Scene already has a ground plane")
        index = add_plane(point, normal, colour)
        self.plane = PlaneInfo(index=index, point=tuple(point), normal=tuple(normal), colour=tuple(colour))
        return index

    def validate(self) -> None:
        """Check the scene is complete.

        Raises:
            ValueError: If the scene has no ground plane.
        """
        if self.plane is None:
            raise ValueError("Scene has no ground plane")

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self.spheres)

    def get_primitive_count(self) -> int:
        """Get the total number of primitives in the GPU table."""
        return get_primitive_count()

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()
        for sphere in self.spheres:
            config.spheres.append(
                {
                    "centre": list(sphere.centre),
                    "radius": sphere.radius,
                    "colour": list(sphere.colour),
                }
            )
        if self.plane is not None:
            config.plane = {
                "point": list(self.plane.point),
                "normal": list(self.plane.normal),
                "colour": list(self.plane.colour),
            }
        return config

    @staticmethod
    def get_max_primitives() -> int:
        """Get the maximum number of primitives supported."""
        return MAX_PRIMITIVES

    def __repr__(self) -> str:
        """Return a string representation of the scene."""
        return f"SceneManager(spheres={len(self.spheres)}, plane={self.plane is not None})"
