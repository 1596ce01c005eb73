#-*- coding: utf-8 -*-
"""
renders the noise into an offscreen framebuffer of a hidden
GLFW window. Needs a display and an OpenGL 4.1 driver, so it
only runs with GPUNOISE_GL_TESTS=1.

the gpu values are not compared pixel by pixel with the numpy
reference: sin() of the large hash arguments is implementation
defined on the device.
"""

import os
import unittest

import numpy as np

from gpunoise.gl.errors import GlError
from gpunoise.noise.params import FRAME_MODULO

GL_TESTS = os.environ.get('GPUNOISE_GL_TESTS', '0') not in ('', '0')

if GL_TESTS:
    from glfw.GLFW import glfwTerminate
    from gpunoise.gl.framebuffer import create_framebuffer
    from gpunoise.gl.glfw import GLFW_Context, bootstrap_gl
    from gpunoise.noise.renderer import NoiseRenderer

SIZE = (64, 48)

@unittest.skipUnless(GL_TESTS, 'set GPUNOISE_GL_TESTS=1 to run OpenGL tests')
class TestOffscreen(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        bootstrap_gl()
        cls.window = GLFW_Context(SIZE, title='gpunoise test', visible=False)
        cls.window.bootstrap()
        cls.window.context()

    @classmethod
    def tearDownClass(cls):
        cls.window.destroy()
        glfwTerminate()

    def setUp(self):
        self.renderer = NoiseRenderer(SIZE)
        self.renderer.init()
        self.framebuffer = create_framebuffer(SIZE)

    def tearDown(self):
        self.framebuffer.delete()
        self.renderer.delete()

    def render(self):
        self.renderer.render(self.framebuffer)
        return self.renderer.read_pixels(self.framebuffer)

    def test_noise_image(self):
        pixels = self.render()

        self.assertEqual(1, self.renderer.frame)
        self.assertEqual((SIZE[1], SIZE[0], 4), pixels.shape)
        self.assertTrue(np.all(np.isfinite(pixels)))
        np.testing.assert_array_equal(pixels[..., 0], pixels[..., 1])
        np.testing.assert_array_equal(pixels[..., 0], pixels[..., 2])
        np.testing.assert_array_equal(pixels[..., 3], 1.0)
        self.assertGreaterEqual(pixels.min(), -1e-6)
        self.assertLessEqual(pixels.max(), 1.0 + 1e-6)

    def test_covers_target(self):
        pixels = self.render()

        # the target is cleared to black, uncovered pixels would stay 0
        black = np.count_nonzero(pixels[..., 0] == 0.0)
        self.assertLess(black, pixels.shape[0] * pixels.shape[1] // 100)
        self.assertGreater(pixels[..., 0].std(), 0.1)

    def test_deterministic(self):
        first = self.render()

        other = NoiseRenderer(SIZE)
        other.init()
        try:
            other.render(self.framebuffer)
            second = other.read_pixels(self.framebuffer)
        finally:
            other.delete()

        np.testing.assert_array_equal(first, second)

    def test_frames_differ(self):
        first = self.render()
        second = self.render()
        self.assertEqual(2, self.renderer.frame)
        self.assertFalse(np.array_equal(first, second))

    def test_frame_wraps(self):
        renderer = NoiseRenderer(SIZE, frame=FRAME_MODULO - 1)
        renderer.init()
        try:
            renderer.render(self.framebuffer)
        finally:
            renderer.delete()
        self.assertEqual(0, renderer.frame)

    def test_target_size_mismatch(self):
        framebuffer = create_framebuffer((SIZE[0] + 1, SIZE[1]))
        try:
            with self.assertRaises(GlError):
                self.renderer.render(framebuffer)
        finally:
            framebuffer.delete()
