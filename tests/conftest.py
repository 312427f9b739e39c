"""Shared pytest fixtures for raykernel.

Taichi may only be initialized once per process, and the kernel module keeps
the uploaded spheres and pixel results in module-level fields, so both are
handled here for every test.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Run ti.init() on the CPU backend once for all tests.

    Re-initializing inside the same process invalidates fields that were
    already allocated.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_kernel_scene():
    """Reset the uploaded spheres and per-pixel hit buffers around each test."""
    # Fields are allocated on first import, which must follow ti.init()
    from raykernel.scene.kernels import clear_scene_fields

    clear_scene_fields()
    yield
    clear_scene_fields()
