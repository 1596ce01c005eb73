"""
basic context api for integrating different context managers
like GLFW, QT, SDL, ...
"""

from gpunoise.gl.common import Event
from gpunoise.gl import GPUNOISE_GL

class ContextException(Exception): pass
class CloseContextException(ContextException): pass

class Context():
    """
    context API:

    events:
    -------
    on_ready        when the context is ready to let
                    the OpenGL.GL functions do their job.

    on_cycle        when the cycle logic should be executed

    on_resize       when the framebuffer was resized. The new
                    size is available as context.resolution.

    on_close        when the context is about to be closed. GL
                    resources should be released here.
    """
    def __init__(self, size=(400, 400), title='window'):
        self.size = tuple(size)
        self.resolution = tuple(size)
        self.title = str(title)

        self.on_ready  = Event()
        self.on_cycle  = Event()
        self.on_resize = Event()
        self.on_close = Event()

    def __gl_context_enable__(self):
        """ activates OpenGL context """
        GPUNOISE_GL.CONTEXT = self

class GlVersion():
    """
    represents OpenGL driver profile
    """
    def __init__(self, version, core_profile=True, forward_compat=True):
        if type(version) is str:
            prt = version.split('.')
            if len(prt) > 2:
                raise ValueError('Argument version must by either tuple or a string. version examples: "4", "4.0", "3.1"')

            version = (int(prt[0]), 0) if len(prt) == 1 else (int(prt[0]), int(prt[1]))

        self.version = tuple(version)
        self.core_profile = bool(core_profile)
        self.forward_compat = bool(forward_compat)

    def __str__(self):
        return '{}.{}{}'.format(self.version[0], self.version[1], ' core' if self.core_profile else '')
