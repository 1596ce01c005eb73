#-*- coding: utf-8 -*-

import unittest

from gpunoise.gl.common import Event
from gpunoise.gl.components.fps import Fps

try:
    from OpenGL.GL import GL_INVALID_OPERATION, GL_OUT_OF_MEMORY
    from OpenGL.error import GLError
    from gpunoise import app as app_module
    from gpunoise.app import DEFAULT_SIZE, TITLE, NoiseController, fps_title, initial_size
    HAS_WINDOWING = True
except Exception:
    HAS_WINDOWING = False

class FakeRenderer():
    def __init__(self, error=None):
        self.error = error
        self.renders = 0
    def render(self):
        if self.error is not None:
            raise self.error
        self.renders += 1

class RecordingRenderer():
    def __init__(self, size):
        self.size = size
        self.initialized = False
        self.resizes = []
    def init(self):
        self.initialized = True
    def resize(self, width, height):
        self.resizes.append((width, height))

class FakeWindow():
    def __init__(self, resolution=(800, 600)):
        self.resolution = resolution
        self.closed = False
        self.title = None
        self.on_resize = Event()
        self.on_cycle = Event()
        self.on_close = Event()
    def close(self):
        self.closed = True
    def set_title(self, title):
        self.title = title

def fake_controller(renderer, window):
    # skips __init__, it needs a current GL context
    controller = NoiseController.__new__(NoiseController)
    controller.window = window
    controller.title = TITLE
    controller.renderer = renderer
    controller.fps = Fps()
    return controller

@unittest.skipUnless(HAS_WINDOWING, 'glfw or PyOpenGL could not load their libraries')
class TestApp(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual('Swarm Wallpaper', TITLE)
        self.assertEqual((800, 600), DEFAULT_SIZE)

    def test_fps_title(self):
        self.assertEqual('Swarm Wallpaper  |  59.9 FPS', fps_title(59.94))
        self.assertEqual('noise  |  120.0 FPS', fps_title(120, 'noise'))

    def test_draw(self):
        renderer, window = FakeRenderer(), FakeWindow()
        fake_controller(renderer, window).draw(window)
        self.assertEqual(1, renderer.renders)
        self.assertFalse(window.closed)

    def test_out_of_memory_closes_window(self):
        window = FakeWindow()
        controller = fake_controller(FakeRenderer(GLError(err=GL_OUT_OF_MEMORY)), window)
        controller.draw(window)
        self.assertTrue(window.closed)

    def test_other_gl_errors_propagate(self):
        window = FakeWindow()
        controller = fake_controller(FakeRenderer(GLError(err=GL_INVALID_OPERATION)), window)
        with self.assertRaises(GLError):
            controller.draw(window)
        self.assertFalse(window.closed)

    def test_show_fps(self):
        window = FakeWindow()
        fake_controller(FakeRenderer(), window).show_fps(30.0)
        self.assertEqual('Swarm Wallpaper  |  30.0 FPS', window.title)

    def test_initial_size(self):
        self.assertEqual((800, 600), initial_size((800, 600)))
        self.assertEqual((1, 1), initial_size((0, 0)))
        self.assertEqual((1, 600), initial_size((0, 600)))

@unittest.skipUnless(HAS_WINDOWING, 'glfw or PyOpenGL could not load their libraries')
class TestNoiseController(unittest.TestCase):

    def setUp(self):
        self._renderer_class = app_module.NoiseRenderer
        app_module.NoiseRenderer = RecordingRenderer

    def tearDown(self):
        app_module.NoiseRenderer = self._renderer_class

    def test_iconified_window(self):
        window = FakeWindow(resolution=(0, 0))
        controller = NoiseController(window)

        self.assertEqual((1, 1), controller.renderer.size)
        self.assertTrue(controller.renderer.initialized)
        self.assertEqual([(0, 0)], controller.renderer.resizes)

    def test_listens_to_window(self):
        window = FakeWindow()
        controller = NoiseController(window)

        self.assertEqual((800, 600), controller.renderer.size)
        self.assertEqual([controller.resize], list(window.on_resize))
        self.assertEqual([controller.draw], list(window.on_cycle))
        self.assertEqual([controller.close], list(window.on_close))

        window.resolution = (1024, 768)
        window.on_resize(window)
        self.assertEqual([(800, 600), (1024, 768)], controller.renderer.resizes)
