#-*- coding: utf-8 -*-
"""
host side of the noise kernel.

owns the parameter block, the uniform buffer and the program and
draws one full screen triangle per frame:

    renderer = NoiseRenderer(window.resolution)
    renderer.init()
    window.on_resize.append(lambda w: renderer.resize(*w.resolution))
    window.on_cycle.append(lambda w: renderer.render())

the renderer needs a current OpenGL 4.1 core context for init(),
render() and delete(). Everything else only touches the
parameter block.
"""
from gpunoise.common.helper import load_lib_file
from gpunoise.gl import GPUNOISE_GL
from gpunoise.gl.buffer import BufferObject
from gpunoise.gl.errors import GlError
from gpunoise.gl.shader import Program, Shader
from gpunoise.gl.viewport import Viewport
from gpunoise.noise.params import (PARAMS_DTYPE, UNIFORM_BLOCK_BINDING, UNIFORM_BLOCK_NAME,
                                   UNIFORM_BLOCK_VARIABLE, advance_frame, create_params, set_size)
from gpunoise.noise.reference import VERTEX_COUNT

from OpenGL.GL import *

VERTEX_SHADER_FILE = 'noise/glsl/noise.vert.glsl'
FRAGMENT_SHADER_FILE = 'noise/glsl/noise.frag.glsl'

def create_noise_program():
    """ compiles and links the noise shader stages """
    program = Program()
    program.shaders.append(Shader(GL_VERTEX_SHADER, load_lib_file(VERTEX_SHADER_FILE)))
    program.shaders.append(Shader(GL_FRAGMENT_SHADER, load_lib_file(FRAGMENT_SHADER_FILE)))
    program.declare_uniform(UNIFORM_BLOCK_NAME, PARAMS_DTYPE, variable=UNIFORM_BLOCK_VARIABLE)
    program.link()
    program.uniform_block_binding(UNIFORM_BLOCK_NAME, UNIFORM_BLOCK_BINDING)
    return program

class NoiseRenderer():
    """
    renders animated greyscale noise into the current framebuffer
    or into an offscreen Framebuffer.
    """
    def __init__(self, size, frame=0):
        self.params = create_params(size, frame)
        self.program = None
        self.ubo = None
        self.gl_vao_id = None

    @property
    def size(self):
        return tuple(float(c) for c in self.params['size'][0])

    @property
    def frame(self):
        return int(self.params['frame'][0])

    def init(self):
        """ creates program, uniform buffer and vertex array """
        GPUNOISE_GL.debug('create noise program', '...')
        self.program = create_noise_program()

        self.ubo = BufferObject.to_device(self.params, target=GL_UNIFORM_BUFFER)
        self.ubo.bind_buffer_base(UNIFORM_BLOCK_BINDING)

        # the vertex stage has no inputs but the core
        # profile does not draw without a bound vao
        self.gl_vao_id = glGenVertexArrays(1)

        # sRGB default framebuffers encode the linear noise on write
        glEnable(GL_FRAMEBUFFER_SRGB)
        GPUNOISE_GL.debug('noise renderer ready', 'OK')

    def resize(self, width, height):
        """
        updates the render target size. A zero size (minimized window)
        is skipped, the last valid size stays in the block.
        """
        if width == 0 or height == 0:
            GPUNOISE_GL.debug('skip resize to {}x{}'.format(width, height))
            return

        set_size(self.params, (width, height))
        self._upload()
        if self.gl_vao_id is not None:
            Viewport((0, 0), (width, height)).use()

    def render(self, target=None):
        """
        advances the frame counter, uploads the parameter block and
        draws the full screen triangle. **target** is an optional
        Framebuffer, its size must match the block size.
        """
        if self.program is None:
            raise GlError('renderer is not initialized. Call NoiseRenderer.init() first.')
        if target is not None and tuple(target.size) != tuple(int(c) for c in self.size):
            raise GlError('render target size {} does not match the parameter block size {}'.format(
                tuple(target.size), self.size))

        advance_frame(self.params)
        self._upload()

        if target is None:
            self._draw()
            return

        # target and viewport are released even if the draw fails
        target.use()
        viewport = Viewport((0, 0), target.size)
        try:
            viewport.use()
            self._draw()
        finally:
            viewport.unuse()
            target.unuse()

    def read_pixels(self, target):
        """ waits for the device and reads **target** back, row 0 is the top row """
        glFinish()
        return target.read_pixels()

    def delete(self):
        """ releases all GL objects and waits for the device """
        if self.gl_vao_id is not None:
            glDeleteVertexArrays(1, [self.gl_vao_id])
            self.gl_vao_id = None
        if self.ubo is not None:
            self.ubo.delete()
            self.ubo = None
        if self.program is not None:
            self.program.delete()
            self.program = None
        glFinish()

    def _draw(self):
        glClearColor(0.0, 0.0, 0.0, 1.0)
        glClear(GL_COLOR_BUFFER_BIT)

        self.program.use()
        try:
            self.ubo.bind_buffer_base(UNIFORM_BLOCK_BINDING)
            glBindVertexArray(self.gl_vao_id)
            glDrawArrays(GL_TRIANGLES, 0, VERTEX_COUNT)
        finally:
            self.program.unuse()
            glBindVertexArray(0)

    def _upload(self):
        if self.ubo is not None:
            self.ubo.set(self.params)
