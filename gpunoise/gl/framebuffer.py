#-*- coding: utf-8 -*-
"""
framebuffer utilities

offscreen render target with a single float color attachment.

    framebuffer = create_framebuffer((800, 600))
    framebuffer.use()
    # ... draw
    pixels = framebuffer.read_pixels()
    framebuffer.unuse()
"""

from OpenGL.GL import *
from gpunoise.gl.texture import Texture2D, gl_texture_id
from gpunoise.gl.errors import GlError

import numpy as np

def create_framebuffer(size, gl_internal_format=GL_RGBA32F):
    """ creates a framebuffer with one color attachment of **size** """
    framebuffer = Framebuffer()
    framebuffer.color_attachment(Texture2D.empty(size, gl_internal_format))
    return framebuffer

class Framebuffer():

    def __init__(self):
        self.attachments = {
            'color': [],
        }
        self.gl_framebuffer_id = glGenFramebuffers(1)

    @property
    def size(self):
        if not self.attachments['color']:
            raise GlError('framebuffer has no color attachment.')
        return self.attachments['color'][0].size

    def color_attachment(self, texture, attachment=0, level=0):
        glBindFramebuffer(GL_FRAMEBUFFER, self.gl_framebuffer_id)
        glFramebufferTexture2D(GL_FRAMEBUFFER, GL_COLOR_ATTACHMENT0 + attachment, texture.gl_target, gl_texture_id(texture), level)
        glBindFramebuffer(GL_FRAMEBUFFER, 0)
        self.attachments['color'].append(texture)

    def use(self):
        glBindFramebuffer(GL_FRAMEBUFFER, self.gl_framebuffer_id)
        if glCheckFramebufferStatus(GL_FRAMEBUFFER) != GL_FRAMEBUFFER_COMPLETE:
            glBindFramebuffer(GL_FRAMEBUFFER, 0)
            raise GlError('framebuffer is not configured properly.')

    def unuse(self):
        glBindFramebuffer(GL_FRAMEBUFFER, 0)

    def read_pixels(self, attachment=0):
        """
        reads the color attachment back. returns a float32
        array (height, width, 4), row 0 is the top row.
        """
        width, height = self.size
        glBindFramebuffer(GL_READ_FRAMEBUFFER, self.gl_framebuffer_id)
        glReadBuffer(GL_COLOR_ATTACHMENT0 + attachment)
        glPixelStorei(GL_PACK_ALIGNMENT, 1)
        data = glReadPixels(0, 0, width, height, GL_RGBA, GL_FLOAT)
        glBindFramebuffer(GL_READ_FRAMEBUFFER, 0)

        # opengl rows start at the bottom
        if isinstance(data, bytes):
            pixels = np.frombuffer(data, dtype=np.float32)
        else:
            pixels = np.asarray(data, dtype=np.float32).ravel()
        return pixels.reshape(height, width, 4)[::-1].copy()

    def delete(self):
        for texture in self.attachments['color']:
            texture.delete()
        self.attachments['color'] = []
        if self.gl_framebuffer_id is not None:
            glDeleteFramebuffers(1, [self.gl_framebuffer_id])
            self.gl_framebuffer_id = None
