#-*- coding: utf-8 -*-
"""
the uniform parameter block read by both noise shader stages.

    layout (std140) uniform Params
    {
        vec2 size;      // render target size in pixels
        uint frame;     // noise seed, wraps at 2**32
        uint padding;
    } params;

the host owns the block. It validates the size before anything
reaches the device and writes the whole block once per frame.
"""
import math

import numpy as np

from gpunoise.gl.errors import GlError
from gpunoise.gl.glsl import assert_std140

UNIFORM_BLOCK_NAME = 'Params'
UNIFORM_BLOCK_VARIABLE = 'params'

# binding point of the block, shared by program and buffer
UNIFORM_BLOCK_BINDING = 0

FRAME_MODULO = 2 ** 32

PARAMS_DTYPE = np.dtype([
    ('size', np.float32, 2),
    ('frame', np.uint32),
    ('padding', np.uint32),
])

PARAMS_BLOCK_SIZE = assert_std140(PARAMS_DTYPE, UNIFORM_BLOCK_NAME)

class ParamsError(GlError, ValueError):
    pass

def validate_size(size):
    """
    returns the render target size as a tuple of two floats.

    raises ParamsError if the size has not exactly two components
    or a component is not a positive finite number. Such a block
    would make the fragment stage produce NaNs.
    """
    try:
        width, height = (float(c) for c in size)
    except (TypeError, ValueError):
        raise ParamsError('size must be a pair of numbers, got {!r}'.format(size))

    for axis, value in (('width', width), ('height', height)):
        if not math.isfinite(value) or value <= 0:
            raise ParamsError('size {} must be positive and finite, got {!r}'.format(axis, value))

    return width, height

def create_params(size, frame=0):
    """ creates a validated parameter block (ndarray of shape (1, )) """
    params = np.zeros(1, dtype=PARAMS_DTYPE)
    set_size(params, size)
    params['frame'] = int(frame) % FRAME_MODULO
    return params

def set_size(params, size):
    params['size'] = validate_size(size)

def advance_frame(params):
    """ increments the frame counter with u32 wrap around and returns it """
    frame = (int(params['frame'][0]) + 1) % FRAME_MODULO
    params['frame'] = frame
    return frame

def params_bytes(params):
    """ the raw std140 bytes as uploaded to the uniform buffer """
    return np.ascontiguousarray(params, dtype=PARAMS_DTYPE).tobytes()
