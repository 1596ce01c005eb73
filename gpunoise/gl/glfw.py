"""
provides a gpunoise integration of the GLFW
window context OpenGL library.

    @GLFW_window
    def main(window):
        window.on_cycle.append(draw)

    main(800, 600, title='noise')
"""
from gpunoise.gl.context import Context, CloseContextException, GlVersion
from gpunoise.gl import GPUNOISE_GL

from glfw.GLFW import *
from OpenGL.GL import glGetString, GL_VENDOR, GL_VERSION, GL_RENDERER, GL_SHADING_LANGUAGE_VERSION

def_version = GlVersion('4.1', core_profile=True, forward_compat=True)

def bootstrap_gl(version=def_version):
    """
    initializes glfw and requests an OpenGL context of **version**
    """
    GPUNOISE_GL.debug('init GLFW', '...')
    if not glfwInit():
        raise RuntimeError('glfw.Init() error')

    glfwWindowHint(GLFW_CONTEXT_VERSION_MAJOR, version.version[0])
    glfwWindowHint(GLFW_CONTEXT_VERSION_MINOR, version.version[1])

    if version.forward_compat != True:
        raise RuntimeError('version.forward_compat=False not supported at the moment')
    if version.core_profile != True:
        raise RuntimeError('version.core_profile=False not supported at the moment')

    glfwWindowHint(GLFW_OPENGL_FORWARD_COMPAT, GLFW_TRUE)
    glfwWindowHint(GLFW_OPENGL_PROFILE, GLFW_OPENGL_CORE_PROFILE)
    glfwWindowHint(GLFW_SRGB_CAPABLE, GLFW_TRUE)
    GPUNOISE_GL.debug('request OpenGL {}'.format(version), 'OK')

class GLFW_Context(Context):
    """
    a glfw context manages the window created by glfwCreateWindow.
    """
    def __init__(self, size, title='no title', visible=True, vsync=True):
        super().__init__(size, title)
        self.visible = bool(visible)
        self.vsync = bool(vsync)
        self._handle = None
        self._glfw_initialized = False
        self._in_cycle = False

    def bootstrap(self):
        if self._glfw_initialized:
            raise RuntimeError('allready initialized.')

        glfwWindowHint(GLFW_VISIBLE, GLFW_TRUE if self.visible else GLFW_FALSE)
        self._handle = glfwCreateWindow(int(self.size[0]), int(self.size[1]), self.title, None, None)
        if not self._handle:
            raise RuntimeError('glfw.CreateWindow() error')

        glfwSetFramebufferSizeCallback(self._handle, self.framebuffer_size_callback)
        glfwSetWindowCloseCallback(self._handle,     self._close_callback)
        self.resolution = tuple(glfwGetFramebufferSize(self._handle))

        self._glfw_initialized = True

    def context(self):
        glfwMakeContextCurrent(self._handle)
        glfwSwapInterval(1 if self.vsync else 0)
        super().__gl_context_enable__()

        GPUNOISE_GL.debug('  + Vendor             {}'.format(_gl_string(GL_VENDOR)))
        GPUNOISE_GL.debug('  + Opengl version     {}'.format(_gl_string(GL_VERSION)))
        GPUNOISE_GL.debug('  + GLSL Version       {}'.format(_gl_string(GL_SHADING_LANGUAGE_VERSION)))
        GPUNOISE_GL.debug('  + Renderer           {}'.format(_gl_string(GL_RENDERER)))

    def set_title(self, title):
        self.title = str(title)
        glfwSetWindowTitle(self._handle, self.title)

    def close(self):
        """ marks the window to be closed within the next cycle """
        glfwSetWindowShouldClose(self._handle, GLFW_TRUE)

    def framebuffer_size_callback(self, window, width, height):
        """ triggers on_resize event. A minimized window reports (0, 0). """
        self.resolution = (width, height)
        if not self._in_cycle:
            super().__gl_context_enable__()
        self.on_resize(self)

    def _close_callback(self, *e):
        GPUNOISE_GL.debug('close requested', '...')

    def cycle(self):
        if glfwWindowShouldClose(self._handle):
            self.on_close(self)
            raise CloseContextException()

        self._in_cycle = True
        self.__gl_context_enable__()
        self.on_cycle(self)
        glfwSwapBuffers(self._handle)
        self._in_cycle = False

    def destroy(self):
        if self._handle is not None:
            glfwDestroyWindow(self._handle)
            self._handle = None
            self._glfw_initialized = False

def GLFW_run(*windows, version=def_version):
    """
    executes a list of GLFW *windows* with a specific
    OpenGL **version** profile.

    This is a generator which yields the window
    which cycle will be executed next.
    """
    windows = list(windows)
    bootstrap_gl(version)
    for window in windows:
        window.bootstrap()
        window.context()
        window.on_ready(window)
    GPUNOISE_GL.debug('application is ready to use.', 'OK')

    while len(windows):
        glfwPollEvents()
        for window in list(windows):
            try:
                yield window
                window.cycle()

            except CloseContextException:
                GPUNOISE_GL.debug('close window', '...')
                windows.remove(window)
                window.destroy()
                GPUNOISE_GL.debug('window closed', 'OK')
            except Exception:
                for w in windows:
                    w.destroy()
                del windows[:]
                glfwTerminate()
                raise

    GPUNOISE_GL.debug('shutdown', '...')
    glfwTerminate()
    GPUNOISE_GL.debug('goodbye', 'OK')


class GLFW_window:
    """ decorator which creates a single window OpenGL GLFW
        application. Decorated function recieves the window instance
        when the context is ready."""
    def __init__(self, f):
        self.f = f

    def __call__(self, width=400, height=400, title="OpenGL GLFW Window", version=def_version):
        window = GLFW_Context(size=(width, height), title=title)
        window.on_ready.append(self.f)
        for window in GLFW_run(window, version=version):
            pass

def _gl_string(name):
    value = glGetString(name)
    return value.decode('utf-8', 'replace') if isinstance(value, bytes) else value
