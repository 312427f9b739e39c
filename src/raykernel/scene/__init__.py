"""Scene module for shape collections and parallel ray casting.

Components:
    manager: Flat list of shapes with merged intersection and serialization
    kernels: Taichi fields and kernels casting many rays against the spheres

The kernels module allocates Taichi fields at import time, so it is not
imported here; import raykernel.scene.kernels after ti.init().
"""

from .manager import Scene, SceneConfig

__all__ = [
    "Scene",
    "SceneConfig",
]
