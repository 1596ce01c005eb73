#-*- coding: utf-8 -*-
"""
numpy reference of the noise shader stages.

mirrors glsl/noise.vert.glsl and glsl/noise.frag.glsl in float32
on the cpu together with a small rasterizer for the full screen
triangle. Used to check the kernel properties without a gpu and
to compare against offscreen renderings.

    params = create_params((800, 600), frame=1)
    image = rasterize(params)   # (600, 800, 4), row 0 is the top row

the values are close to, but not bit exact with, a gpu rendering
since sin() of large arguments differs between implementations.
"""
import numpy as np

from gpunoise.noise.params import validate_size

VERTEX_COUNT = 3

FULLSCREEN_TRIANGLE = np.array([
    (-1.0, -3.0),
    (-1.0,  1.0),
    ( 3.0,  1.0),
], dtype=np.float32)

HASH_Q_X = np.array((127.1, 311.7), dtype=np.float32)
HASH_Q_Y = np.array((269.5, 183.3), dtype=np.float32)
HASH_SCALE = np.float32(43758.5453)
HASH_FOLD = np.array((1.0, 7.0), dtype=np.float32)

def vertex_stage(vertex_index):
    """ returns clip space position (vec4) and uv (vec2) of a vertex """
    p = FULLSCREEN_TRIANGLE[vertex_index]
    position = np.array((p[0], p[1], 0.0, 1.0), dtype=np.float32)
    uv = p * np.float32(0.5) + np.float32(0.5)
    return position, uv

def noise_hash(p, seed):
    """
    maps coordinates **p** (..., 2) and a scalar **seed** to
    pseudo random values in [0, 1]. Vectorized over the leading
    axes of **p**.
    """
    p = np.asarray(p, dtype=np.float32)
    seed = np.float32(seed)

    # elementwise dot products. matmul rounding depends on the array shape.
    q = np.stack((_dot(p, HASH_Q_X), _dot(p, HASH_Q_Y)), axis=-1)
    s = np.sin(q + seed) * HASH_SCALE
    v = np.sin(_dot(s, HASH_FOLD)) * np.float32(0.5) + np.float32(0.5)

    return v - np.floor(v)

def _dot(a, b):
    return a[..., 0] * b[0] + a[..., 1] * b[1]

def fragment_stage(uv, params):
    """ greyscale rgba color (..., 4) of the fragments at **uv** """
    uv = np.asarray(uv, dtype=np.float32)
    p = uv * params['size'][0]
    n = np.asarray(noise_hash(p, np.float32(params['frame'][0])))

    color = np.empty(n.shape + (4, ), dtype=np.float32)
    color[..., :3] = n[..., None]
    color[..., 3] = 1.0
    return color

def window_to_uv(frag_coord, size):
    """
    the interpolated uv the rasterizer hands to the fragment
    stage at window position **frag_coord** (origin bottom left).

    uv is an affine function of the clip space position, so it is
    the window position divided by the viewport size.
    """
    width, height = validate_size(size)
    frag_coord = np.asarray(frag_coord, dtype=np.float64)
    return frag_coord / np.array((width, height))

def triangle_window_coords(size):
    """ the triangle vertices mapped into window coordinates """
    width, height = validate_size(size)
    ndc = FULLSCREEN_TRIANGLE.astype(np.float64)
    return (ndc * 0.5 + 0.5) * np.array((width, height))

def coverage(size):
    """
    boolean mask (height, width) of the pixels whose centers lie
    inside the full screen triangle. Uses edge functions like a
    hardware rasterizer does.
    """
    width, height = validate_size(size)
    a, b, c = triangle_window_coords((width, height))

    xs = np.arange(int(width)) + 0.5
    ys = np.arange(int(height)) + 0.5
    px, py = np.meshgrid(xs, ys)

    def edge(v0, v1):
        return (v1[0] - v0[0]) * (py - v0[1]) - (v1[1] - v0[1]) * (px - v0[0])

    e0, e1, e2 = edge(a, b), edge(b, c), edge(c, a)
    inside = ((e0 >= 0) & (e1 >= 0) & (e2 >= 0)) | ((e0 <= 0) & (e1 <= 0) & (e2 <= 0))

    # rows bottom to top
    return inside[::-1]

def rasterize(params):
    """
    renders the noise for a parameter block on the cpu.
    returns a float32 image (height, width, 4), row 0 is the top row.
    Uncovered pixels stay black like the cleared gpu target.
    """
    width, height = validate_size(params['size'][0])

    xs = np.arange(int(width)) + 0.5
    ys = np.arange(int(height)) + 0.5
    frag_coord = np.stack(np.meshgrid(xs, ys), axis=-1)

    uv = window_to_uv(frag_coord, (width, height)).astype(np.float32)
    image = fragment_stage(uv, params)

    image[~coverage((width, height))[::-1]] = (0.0, 0.0, 0.0, 1.0)

    return image[::-1]
