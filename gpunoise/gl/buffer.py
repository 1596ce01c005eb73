#-*- coding: utf-8 -*-
"""
buffer objects

    ubo = BufferObject.to_device(params, target=GL_UNIFORM_BUFFER)
    ubo.bind_buffer_base(0)
    program.uniform_block_binding('Params', ubo)

    # next frame
    ubo.set(params)

the buffer keeps the dtype and the byte size of the first upload.
Later uploads must have the same size, a buffer never grows.
"""
from gpunoise.gl.errors import GlError
from gpunoise.gl.gpunoisegl import GPUNOISE_GL

from OpenGL.GL import *
import numpy as np

class BufferObject():
    """
    opengl buffer representation
    """
    def __init__(self, target=GL_UNIFORM_BUFFER, usage=GL_DYNAMIC_DRAW):
        self.target = target
        self.usage = usage
        self.dtype = None
        self.nbytes = 0
        self.gl_buffer_base = None
        self.gl_buffer_id = glGenBuffers(1)

    @classmethod
    def to_device(cls, ndarray, target=GL_UNIFORM_BUFFER, usage=GL_DYNAMIC_DRAW):
        """ creates a buffer and allocates it with the contents of **ndarray** """
        buffer = cls(target=target, usage=usage)
        buffer.allocate(ndarray)
        return buffer

    def allocate(self, ndarray):
        data = _as_bytes(ndarray)
        self.dtype = ndarray.dtype
        self.nbytes = data.nbytes

        glBindBuffer(self.target, self.gl_buffer_id)
        glBufferData(self.target, self.nbytes, data, self.usage)
        glBindBuffer(self.target, 0)
        GPUNOISE_GL.debug('buffer {} allocated with {} bytes'.format(self.gl_buffer_id, self.nbytes), 'OK')

    def set(self, ndarray, offset=0):
        """ uploads **ndarray** into the allocated storage at byte **offset** """
        data = _as_bytes(ndarray)
        if offset + data.nbytes > self.nbytes:
            raise GlError('cannot write {} bytes at offset {} into buffer of {} bytes.'.format(
                data.nbytes, offset, self.nbytes))

        glBindBuffer(self.target, self.gl_buffer_id)
        glBufferSubData(self.target, offset, data.nbytes, data)
        glBindBuffer(self.target, 0)

    def bind_buffer_base(self, index):
        """ binds the buffer to the indexed binding point **index** """
        glBindBufferBase(self.target, index, self.gl_buffer_id)
        self.gl_buffer_base = index

    def delete(self):
        if self.gl_buffer_id is not None:
            glDeleteBuffers(1, [self.gl_buffer_id])
            self.gl_buffer_id = None
            self.gl_buffer_base = None

def _as_bytes(ndarray):
    # structured dtypes are uploaded as raw bytes
    return np.ascontiguousarray(ndarray).view(np.uint8).reshape(-1)
