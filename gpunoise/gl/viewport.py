#-*- coding: utf-8 -*-
"""
viewport
"""
from OpenGL.GL import *

class Viewport():

    def __init__(self, position, size):
        self.position = (int(position[0]), int(position[1]))
        self.size = (int(size[0]), int(size[1]))
        self._old_viewport = None

    def use(self):
        self._old_viewport = glGetIntegerv(GL_VIEWPORT)
        glViewport(*self.position, *self.size)

    def unuse(self):
        if self._old_viewport is not None:
            glViewport(*[int(v) for v in self._old_viewport])
            self._old_viewport = None
