"""Taichi kernels for casting many rays against the scene's spheres.

This module mirrors the Python intersection path (`Sphere.intersects` and
`hit`) inside Taichi functions so that whole images, or arbitrary batches of
rays, are cast in parallel on the GPU or CPU backend.

Spheres are stored as their world-to-object (inverse) transforms in Taichi
fields. The inverse is computed once on the Python side with the cofactor
expansion in `raykernel.core.matrix`, so a singular transform is rejected at
upload time.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.scene.kernels import cast_rays, upload_scene
    >>> upload_scene(scene)
    >>> ids, ts = cast_rays(origins, directions)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raykernel.geometry.sphere import Sphere
from raykernel.scene.manager import Scene

# Type aliases for homogeneous tuples and transforms
vec4 = tm.vec4
mat4 = tm.mat4

# Maximum number of spheres the kernel storage holds
MAX_SPHERES = 1024

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Maximum number of rays per cast_rays() call
MAX_RAYS = MAX_IMAGE_WIDTH * MAX_IMAGE_HEIGHT

# Hit index / id written for rays that hit nothing
NO_HIT = -1

# Sphere storage
sphere_inverse_transforms = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SPHERES)
sphere_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Per-pixel results of cast_wall(), indexed [x, y]
_pixel_hit_ids = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))
_pixel_hit_ts = ti.field(dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))


def clear_scene_fields() -> None:
    """Clear the uploaded spheres and the per-pixel results."""
    num_spheres[None] = 0
    _pixel_hit_ids.fill(NO_HIT)
    _pixel_hit_ts.fill(0.0)


def upload_scene(scene: Scene) -> int:
    """Copy the scene's spheres into the kernel fields.

    Replaces whatever was uploaded before.

    Args:
        scene: The scene to upload.

    Returns:
        The number of spheres uploaded.

    Raises:
        TypeError: If the scene contains a shape that is not a Sphere.
        RuntimeError: If the scene has more than MAX_SPHERES shapes.
        SingularMatrixError: If a sphere transform cannot be inverted.
    """
    count = scene.get_shape_count()
    if count > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    num_spheres[None] = 0
    for idx, shape in enumerate(scene.shapes):
        if not isinstance(shape, Sphere):
            raise TypeError(f"Kernel casting supports spheres only, got {type(shape).__name__}")
        sphere_inverse_transforms[idx] = ti.Matrix(shape.inverse_transform.rows())
        sphere_ids[idx] = shape.id
    num_spheres[None] = count
    return count


def get_uploaded_sphere_count() -> int:
    """Get the number of spheres currently in the kernel fields."""
    return int(num_spheres[None])


# =============================================================================
# Intersection Functions
# =============================================================================


@ti.func
def intersect_unit_sphere(origin: vec4, direction: vec4, inverse: mat4):
    """Intersect a world-space ray with a unit sphere given its inverse transform.

    Args:
        origin: Ray origin as a homogeneous point (w = 1).
        direction: Ray direction as a homogeneous vector (w = 0).
        inverse: The sphere's world-to-object transform.

    Returns:
        Tuple (count, t0, t1) where count is 0 on a miss or a zero-length
        direction and 2 otherwise, and t0 <= t1.
    """
    local_origin = inverse @ origin
    local_direction = inverse @ direction

    # Vector from sphere centre (object-space origin) to ray origin
    sphere_to_ray = local_origin - vec4(0.0, 0.0, 0.0, 1.0)

    a = tm.dot(local_direction, local_direction)
    b = 2.0 * tm.dot(local_direction, sphere_to_ray)
    c = tm.dot(sphere_to_ray, sphere_to_ray) - 1.0
    discriminant = b * b - 4.0 * a * c

    count = 0
    t0 = 0.0
    t1 = 0.0
    if a > 0.0 and discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        count = 2
        t0 = (-b - sqrt_d) / (2.0 * a)
        t1 = (-b + sqrt_d) / (2.0 * a)
    return count, t0, t1


@ti.func
def nearest_hit(origin: vec4, direction: vec4):
    """Find the nearest non-negative intersection over all uploaded spheres.

    Args:
        origin: Ray origin as a homogeneous point.
        direction: Ray direction as a homogeneous vector.

    Returns:
        Tuple (index, t): the storage index of the closest sphere and its t,
        or (NO_HIT, 0.0) if nothing is hit at t >= 0.
    """
    best_index = NO_HIT
    best_t = 0.0
    for i in range(num_spheres[None]):
        count, t0, t1 = intersect_unit_sphere(origin, direction, sphere_inverse_transforms[i])
        if count > 0:
            # t0 <= t1, so the first non-negative root is the sphere's hit
            t = t0
            if t < 0.0:
                t = t1
            if t >= 0.0 and (best_index == NO_HIT or t < best_t):
                best_index = i
                best_t = t
    return best_index, best_t


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def _cast_ray_batch(
    origins: ti.types.ndarray(dtype=ti.f32, ndim=2),
    directions: ti.types.ndarray(dtype=ti.f32, ndim=2),
    out_ids: ti.types.ndarray(dtype=ti.i32, ndim=1),
    out_ts: ti.types.ndarray(dtype=ti.f32, ndim=1),
    n: ti.i32,
):
    """Cast n rays given as rows of (x, y, z) origins and directions."""
    for k in range(n):
        origin = vec4(origins[k, 0], origins[k, 1], origins[k, 2], 1.0)
        direction = vec4(directions[k, 0], directions[k, 1], directions[k, 2], 0.0)
        index, t = nearest_hit(origin, direction)
        out_ids[k] = NO_HIT
        out_ts[k] = t
        if index != NO_HIT:
            out_ids[k] = sphere_ids[index]


@ti.kernel
def _cast_wall_columns(
    x_start: ti.i32,
    x_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    eye_z: ti.f32,
    wall_z: ti.f32,
    wall_size: ti.f32,
):
    """Cast one ray per pixel for columns [x_start, x_end) through the wall."""
    half = wall_size / 2.0
    pixel_w = wall_size / ti.cast(width, ti.f32)
    pixel_h = wall_size / ti.cast(height, ti.f32)
    origin = vec4(0.0, 0.0, eye_z, 1.0)
    for x, y in ti.ndrange((x_start, x_end), height):
        world_x = -half + pixel_w * ti.cast(x, ti.f32)
        world_y = -half + pixel_h * ti.cast(y, ti.f32)
        target = vec4(world_x, world_y, wall_z, 1.0)
        direction = tm.normalize(target - origin)
        index, t = nearest_hit(origin, direction)
        _pixel_hit_ids[x, y] = NO_HIT
        _pixel_hit_ts[x, y] = t
        if index != NO_HIT:
            _pixel_hit_ids[x, y] = sphere_ids[index]


# =============================================================================
# Public API
# =============================================================================


def cast_rays(
    origins: npt.ArrayLike,
    directions: npt.ArrayLike,
) -> tuple[npt.NDArray[np.int32], npt.NDArray[np.float32]]:
    """Cast a batch of world-space rays against the uploaded spheres.

    Args:
        origins: Array of shape (N, 3) with ray origin points.
        directions: Array of shape (N, 3) with ray direction vectors.

    Returns:
        Tuple (ids, ts) of arrays of length N. ids holds the id of the hit
        shape or NO_HIT; ts holds the hit distance (0.0 on a miss).

    Raises:
        ValueError: If the arrays are not (N, 3), differ in length, or
            N exceeds MAX_RAYS.
    """
    origins_arr = np.ascontiguousarray(origins, dtype=np.float32)
    directions_arr = np.ascontiguousarray(directions, dtype=np.float32)
    if origins_arr.ndim != 2 or origins_arr.shape[1] != 3:
        raise ValueError(f"origins must have shape (N, 3), got {origins_arr.shape}")
    if directions_arr.shape != origins_arr.shape:
        raise ValueError(
            f"directions shape {directions_arr.shape} does not match origins {origins_arr.shape}"
        )
    n = origins_arr.shape[0]
    if n > MAX_RAYS:
        raise ValueError(f"Cannot cast more than {MAX_RAYS} rays at once, got {n}")

    ids = np.full(n, NO_HIT, dtype=np.int32)
    ts = np.zeros(n, dtype=np.float32)
    if n > 0:
        _cast_ray_batch(origins_arr, directions_arr, ids, ts, n)
    return ids, ts


def cast_wall(
    x_start: int,
    x_end: int,
    width: int,
    height: int,
    eye_z: float,
    wall_z: float,
    wall_size: float,
) -> None:
    """Cast the silhouette rays for a range of canvas columns.

    Results are kept in the per-pixel fields; read them with
    get_hit_ids_numpy().

    Raises:
        ValueError: If the dimensions exceed the preallocated maximum.
    """
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    _cast_wall_columns(x_start, x_end, width, height, eye_z, wall_z, wall_size)


def get_hit_ids_numpy(width: int, height: int) -> npt.NDArray[np.int32]:
    """Get the per-pixel hit ids as an array of shape (height, width).

    Rows follow the canvas convention ([y][x]); NO_HIT marks misses.
    """
    full = _pixel_hit_ids.to_numpy()
    return np.ascontiguousarray(full[:width, :height].T)
