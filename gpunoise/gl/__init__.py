"""
gpunoise.gl 

OpenGL helpers: glsl code generation from numpy dtypes, shader programs,
uniform buffers, offscreen framebuffers and a glfw window context.

The submodules which talk to OpenGL are not imported here so that the
numpy only parts (glsl, errors) stay usable without a GL library:

    from gpunoise.gl.shader import Shader, Program
    from gpunoise.gl.buffer import BufferObject
"""
from gpunoise.gl.gpunoisegl import GPUNOISE_GL

__all__ = ['GPUNOISE_GL']
