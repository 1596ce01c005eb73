#-*- coding: utf-8 -*-
"""
texture utilities

only what a render target needs: an empty 2d texture
with a fixed size and internal format.

    texture = Texture2D.empty((800, 600))
"""
from OpenGL.GL import *

# it is important to define at least those
# texture parameters. otherwise the texture
# interpolation yields (0, 0, 0, 0)
DEFAULT_TEXTURE_PARAMETERS = {
    GL_TEXTURE_MAG_FILTER: GL_NEAREST,
    GL_TEXTURE_MIN_FILTER: GL_NEAREST
}

def gl_texture_id(texture_id):
    """
    returns a valid texture_id from a given object
    or raises a ValueError
    """
    if hasattr(texture_id, 'gl_texture_id'):
        texture_id = texture_id.gl_texture_id

    if texture_id is None or int(texture_id) != texture_id or texture_id < 1:
        raise ValueError('invalid texture id ({})'.format(texture_id))

    return texture_id

class Texture2D():
    """
    2d texture.

    ..code ::
        texture = Texture2D.empty((width, height), gl_internal_format=GL_RGBA32F)
    """
    def __init__(self, gl_texture_parameters=DEFAULT_TEXTURE_PARAMETERS):
        self.gl_target = GL_TEXTURE_2D
        self.gl_texture_parameters = gl_texture_parameters
        self.gl_texture_id = glGenTextures(1)
        self.size = None

    @classmethod
    def empty(cls, size, gl_internal_format=GL_RGBA32F, *args, **kwargs):
        """
        creates an empty texture of **size** (width, height)
        """
        texture = cls(*args, **kwargs)
        texture.format(size, gl_internal_format)
        return texture

    def format(self, size, gl_internal_format=GL_RGBA32F):
        """ (re)allocates the texture storage """
        self.size = (int(size[0]), int(size[1]))
        self.bind()
        for parameter, value in self.gl_texture_parameters.items():
            glTexParameteri(self.gl_target, parameter, value)
        glTexImage2D(self.gl_target, 0, gl_internal_format, self.size[0], self.size[1], 0, GL_RGBA, GL_FLOAT, None)
        self.unbind()

    def bind(self):
        glBindTexture(self.gl_target, self.gl_texture_id)

    def unbind(self):
        glBindTexture(self.gl_target, 0)

    def delete(self):
        if self.gl_texture_id is not None:
            glDeleteTextures([self.gl_texture_id])
            self.gl_texture_id = None
