#-*- coding: utf-8 -*-
"""
swarm wallpaper: a window filled with animated noise.

the frame rate is shown in the window title once per second.

    python -m gpunoise
"""
from gpunoise.gl import GPUNOISE_GL
from gpunoise.gl.components.fps import Fps
from gpunoise.gl.glfw import GLFW_window
from gpunoise.noise.renderer import NoiseRenderer

from OpenGL.GL import GL_OUT_OF_MEMORY
from OpenGL.error import GLError

TITLE = 'Swarm Wallpaper'
DEFAULT_SIZE = (800, 600)

def fps_title(fps, title=TITLE):
    return '{}  |  {:.1f} FPS'.format(title, fps)

def initial_size(resolution):
    """ a window created iconified reports a zero framebuffer size """
    return tuple(max(1, int(c)) for c in resolution)

class NoiseController():
    def __init__(self, window, title=TITLE):
        self.window = window
        self.title = title
        self.renderer = NoiseRenderer(initial_size(window.resolution))
        self.fps = Fps()
        self.fps.on_fps.append(self.show_fps)

        window.on_resize.append(self.resize)
        window.on_cycle.append(self.draw)
        window.on_close.append(self.close)

        self.renderer.init()
        self.renderer.resize(*window.resolution)

    def resize(self, window):
        self.renderer.resize(*window.resolution)

    def draw(self, window):
        try:
            self.renderer.render()
        except GLError as e:
            if e.err != GL_OUT_OF_MEMORY:
                raise
            GPUNOISE_GL.error('device is out of memory, closing the window.')
            window.close()
            return
        self.fps.tick()

    def show_fps(self, fps):
        self.window.set_title(fps_title(fps, self.title))

    def close(self, window):
        GPUNOISE_GL.info('the window was closed; stopping')
        GPUNOISE_GL.debug('release noise renderer', '...')
        self.renderer.delete()

@GLFW_window
def noise_window(window):
    NoiseController(window)

def main(width=DEFAULT_SIZE[0], height=DEFAULT_SIZE[1]):
    noise_window(width, height, title=TITLE)
