#-*- coding: utf-8 -*-
"""
shader source handling. Nothing here needs a GL context,
but importing OpenGL.GL needs a loadable GL library.
"""

import unittest

import numpy as np

try:
    from OpenGL.GL import GL_VERTEX_SHADER, GL_FRAGMENT_SHADER
    from gpunoise.gl import shader as shader_module
    from gpunoise.gl.shader import Shader, ShaderError, Program, ProgramError
    HAS_OPENGL = True
except Exception:
    HAS_OPENGL = False

BLOCK_DTYPE = np.dtype([('size', np.float32, 2), ('frame', np.uint32), ('padding', np.uint32)])

VERTEX_SOURCE = """{% version %}
{% uniform_block Params %}
out vec2 uv;
void main() {
    uv = vec2(0.0);
    gl_Position = vec4(0.0, 0.0, 0.0, ${W});
}
"""

@unittest.skipUnless(HAS_OPENGL, 'PyOpenGL could not load a GL library')
class TestShader(unittest.TestCase):

    def test_tags_are_found(self):
        shader = Shader(GL_VERTEX_SHADER, VERTEX_SOURCE)
        self.assertEqual(['Params'], shader.uniform_blocks)
        self.assertEqual({'uv': ('out', 'vec2')}, shader.attributes)

    def test_precompile(self):
        shader = Shader(GL_VERTEX_SHADER, VERTEX_SOURCE, substitutions={'W': '1.0'})
        shader.declare_uniform('Params', BLOCK_DTYPE, variable='params')
        source = shader.precompile()

        self.assertTrue(source.startswith('#version 410\n'))
        self.assertIn('layout (std140) uniform Params\n{\n\tvec2 size;\n\tuint frame;\n\tuint padding;\n} params;', source)
        self.assertIn('gl_Position = vec4(0.0, 0.0, 0.0, 1.0);', source)
        self.assertNotIn('{%', source)

    def test_precompile_undeclared_block(self):
        shader = Shader(GL_VERTEX_SHADER, VERTEX_SOURCE)
        with self.assertRaises(ShaderError):
            shader.precompile()

    def test_declare_unknown_block(self):
        shader = Shader(GL_VERTEX_SHADER, VERTEX_SOURCE)
        with self.assertRaises(ValueError):
            shader.declare_uniform('Camera', BLOCK_DTYPE)

    def test_declare_by_glsl_code(self):
        shader = Shader(GL_VERTEX_SHADER, VERTEX_SOURCE)
        shader.declare_uniform('Params', 'layout (std140) uniform Params { vec2 size; uint frame; uint padding; } params;')
        self.assertEqual(BLOCK_DTYPE, shader.uniform_dtype['Params'])

    def test_declare_by_wrong_glsl_code(self):
        shader = Shader(GL_VERTEX_SHADER, VERTEX_SOURCE)
        with self.assertRaises(ShaderError):
            shader.declare_uniform('Params', 'uniform Other { float a; };')

    def test_tag_and_explicit_declaration(self):
        source = VERTEX_SOURCE + '\nlayout (std140) uniform Params { float a; };\n'
        with self.assertRaises(ShaderError):
            Shader(GL_VERTEX_SHADER, source)

    def test_explicit_declaration(self):
        shader = Shader(GL_FRAGMENT_SHADER, """{% version %}
            layout (std140) uniform Params { vec2 size; uint frame; uint padding; } params;
            out vec4 frag_color;
            void main() { frag_color = vec4(params.size, 0.0, 1.0); }
        """)
        self.assertEqual(['Params'], shader.uniform_blocks)
        self.assertEqual(BLOCK_DTYPE, shader.uniform_dtype['Params'])

@unittest.skipUnless(HAS_OPENGL, 'PyOpenGL could not load a GL library')
class TestProgram(unittest.TestCase):

    def test_declare_uniform_in_all_shaders(self):
        program = Program()
        program.shaders.append(Shader(GL_VERTEX_SHADER, VERTEX_SOURCE))
        program.shaders.append(Shader(GL_FRAGMENT_SHADER, "{% version %}\n{% uniform_block Params %}\nvoid main() {}\n"))
        program.declare_uniform('Params', BLOCK_DTYPE, variable='params')

        for shader in program.shaders:
            self.assertEqual(BLOCK_DTYPE, shader.uniform_dtype['Params'])

    def test_declare_unknown_uniform(self):
        program = Program()
        program.shaders.append(Shader(GL_VERTEX_SHADER, VERTEX_SOURCE))
        with self.assertRaises(ProgramError):
            program.declare_uniform('Camera', BLOCK_DTYPE)

    def test_binding_before_link(self):
        program = Program()
        with self.assertRaises(ProgramError):
            program.uniform_block_binding('Params', 0)

LINK_VERTEX_SOURCE = """{% version %}
in vec4 vertex;
void main() { gl_Position = vertex; }
"""

LINK_FRAGMENT_SOURCE = """{% version %}
{% uniform_block Params %}
out vec4 frag_color;
void main() { frag_color = vec4(params.size, 0.0, 1.0); }
"""

@unittest.skipUnless(HAS_OPENGL, 'PyOpenGL could not load a GL library')
class TestProgramLink(unittest.TestCase):
    """ Program.link() against a driver replaced by plain functions """

    def setUp(self):
        self.block_size = BLOCK_DTYPE.itemsize
        self.calls = []
        self.shader_ids = iter(range(1, 100))

        def uniform_block_size(program_id, index, pname, data_size):
            data_size[0] = self.block_size

        def unexpected(name):
            def fail(*args):
                raise AssertionError('{} should not be called'.format(name))
            return fail

        driver = {
            'glCreateProgram': lambda: 7,
            'glCreateShader': lambda shader_type: next(self.shader_ids),
            'glShaderSource': lambda *args: None,
            'glCompileShader': lambda *args: None,
            'glGetShaderiv': lambda *args: 1,
            'glAttachShader': lambda *args: self.calls.append(('attach', ) + args),
            'glLinkProgram': lambda *args: self.calls.append(('link', ) + args),
            'glGetProgramiv': lambda *args: 1,
            'glGetUniformBlockIndex': lambda program_id, name: 0,
            'glGetActiveUniformBlockiv': uniform_block_size,
            'glUniformBlockBinding': lambda *args: self.calls.append(('binding', ) + args),
            'glGetAttribLocation': unexpected('glGetAttribLocation'),
        }
        self._originals = {name: getattr(shader_module, name) for name in driver}
        for name, function in driver.items():
            setattr(shader_module, name, function)

    def tearDown(self):
        for name, function in self._originals.items():
            setattr(shader_module, name, function)

    def create_program(self):
        program = Program()
        program.shaders.append(Shader(GL_VERTEX_SHADER, LINK_VERTEX_SOURCE))
        program.shaders.append(Shader(GL_FRAGMENT_SHADER, LINK_FRAGMENT_SOURCE))
        program.declare_uniform('Params', BLOCK_DTYPE, variable='params')
        return program

    def test_link_without_attribute_lookup(self):
        program = self.create_program()
        self.assertEqual(7, program.link())
        self.assertEqual({'Params': 0}, program.uniform_block_index)
        self.assertEqual([('attach', 7, 1), ('attach', 7, 2), ('link', 7)], self.calls)

        program.uniform_block_binding('Params', 0)
        self.assertEqual(('binding', 7, 0, 0), self.calls[-1])

    def test_block_size_mismatch(self):
        self.block_size = 32
        with self.assertRaises(ProgramError):
            self.create_program().link()
