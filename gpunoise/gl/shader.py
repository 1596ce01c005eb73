#-*- coding: utf-8 -*-
"""
shader library

    try:
        program         = Program()
        vertex_shader   = Shader(GL_VERTEX_SHADER, load_lib_file('noise/glsl/noise.vert.glsl'))
        fragment_shader = Shader(GL_FRAGMENT_SHADER, load_lib_file('noise/glsl/noise.frag.glsl'))

        program.shaders.append(vertex_shader)
        program.shaders.append(fragment_shader)
        program.declare_uniform('Params', PARAMS_DTYPE, variable='params')
        program.link()
    except GlError as e:
        print('oh no, too bad..', e)

shaders understand a few tags which are substituted before compilation:

    {% version %}               #version line of the configured glsl version
    {% uniform_block <name> %}  uniform block rendered from a numpy dtype
    ${NAME}                     value of substitutions['NAME']

shaders find their in/out variables and uniform blocks. programs
collect the uniform blocks of all shaders and check their sizes
after linking.
"""

from gpunoise.gl.errors import GlError
from gpunoise.gl.glsl import (GlslParseError, GlslRenderError, find_structs_as_dtype,
                              render_uniform_block_from_dtype)
from gpunoise.gl.gpunoisegl import GPUNOISE_GL

import re
from OpenGL.GL import *
import numpy as np

STRING_SHADER_NAMES = {
    GL_VERTEX_SHADER         : 'GL_VERTEX_SHADER',
    GL_GEOMETRY_SHADER       : 'GL_GEOMETRY_SHADER',
    GL_FRAGMENT_SHADER       : 'GL_FRAGMENT_SHADER',
    GL_TESS_CONTROL_SHADER   : 'GL_TESS_CONTROL_SHADER',
    GL_TESS_EVALUATION_SHADER: 'GL_TESS_EVALUATION_SHADER',
    GL_COMPUTE_SHADER        : 'GL_COMPUTE_SHADER',
}

class ShaderError(GlError):
    def __init__(self, shader, msg, *args, **kwargs):
        GlError.__init__(self, 'Shader({}): {}'.format(STRING_SHADER_NAMES[shader.type], msg), *args, **kwargs)

class ProgramError(GlError):
    pass


class Shader():
    """
    shader representation
    """
    def __init__(self, type, source, substitutions={}):
        """
        initializes shader by given source.
        matches all attributes and uniform blocks
        by using regex
        """
        self.substitutions = {
            'VERSION': 410
        }
        self.substitutions.update(substitutions)

        self.source = source
        self.type = type
        self.gl_shader_id = None

        # vertex attributes
        self.attributes = None

        # uniform block declaration
        self.uniforms_require_declaration = {}
        self.uniforms_declarations = {}
        self.uniform_dtype = {} # contains information about uniform block dtypes
        self.uniform_blocks = [] # a list of all uniform blocks within the shader

        self._precompiled_source = self.source
        self.parse()

    def parse(self):
        """
        prepares the shader by extracting all informations from given glsl code:
        - tags {% uniform_block <name> %}
        - attributes, uniform_blocks
        """
        try:
            self._prepare_attributes()
            self._prepare_uniform_blocks()
        except (GlslParseError, GlslRenderError) as e:
            self._serr('parse error: {}'.format(e.message))

    def declare_uniform(self, name, declr, layout='std140', variable=None):
        """ declares uniform interface block. if declr
            is numpy dtype it will be rendered to glsl
            shader code.

            While rendering a numpy dtype the function tries
            to find bad declarations and raises GlslRenderError if
            bad declarations are found."""

        if not name in self.uniform_blocks:
            raise ValueError('no uniform block "{}" found within shader. Available uniform blocks: {}'.format(
                name, ', '.join(self.uniform_blocks)))

        if hasattr(declr, 'dtype'):
            declr = declr.dtype

        # declare uniform block by numpy dtype
        if isinstance(declr, np.dtype):
            gl_code = render_uniform_block_from_dtype(name, declr, layout, variable=variable)
            dtype = declr

        # a gl_code declaration was given. It will be parsed to check
        # whether it matches with specified interface block name.
        elif type(declr) is str:
            gl_code = declr
            uniform_dtype = find_structs_as_dtype(gl_code)

            if not name in uniform_dtype:
                self._serr('uniform name "{}" not defined in declaration: \n{}\n.'.format(name, gl_code))

            dtype = uniform_dtype[name]

        # invalid arguments
        else:
            raise ValueError('argument declr must be either a glsl code declaration or a numpy dtype')

        # register
        if name in self.uniform_dtype and dtype != self.uniform_dtype[name]:
            if not name in self.uniforms_declarations:
                GPUNOISE_GL.warn((
                    'uniform block declaration for "{}" differs '
                    'from glsl declaration. ({})').format(name, STRING_SHADER_NAMES[self.type]))
                GPUNOISE_GL.hint((
                    'you may use {% uniform_block <name> %} tag to generate '
                    'uniform block declaration from numpy dtype within glsl code.'))
            else:
                GPUNOISE_GL.warn((
                    'uniform block declaration for "{}" differs '
                    'from previous declaration. ({})').format(name, STRING_SHADER_NAMES[self.type]))

        self.uniforms_declarations[name] = gl_code
        self.uniform_dtype[name] = dtype

    def delete(self):
        """
        deletes gl shader if exists
        """
        if self.gl_shader_id is not None:
            glDeleteShader(self.gl_shader_id)
            self.gl_shader_id = None

    def compile(self):
        """
        compiles shader and returns gl id
        """
        if self.gl_shader_id is None:
            self.gl_shader_id = glCreateShader(self.type)
            if self.gl_shader_id < 1:
                self.gl_shader_id = None
                self._serr('glCreateShader returns an invalid id.')

            glShaderSource(self.gl_shader_id, self.precompile())
            glCompileShader(self.gl_shader_id)

            if not glGetShaderiv(self.gl_shader_id, GL_COMPILE_STATUS):
                error_log = glGetShaderInfoLog(self.gl_shader_id)
                self.delete()
                self._serr('{}'.format(_decode_log(error_log)))

        return self.gl_shader_id

    def precompile(self):
        """
        returns the glsl source with all tags substituted.
        """
        source = self._precompiled_source
        source = re.sub(r'\{\%\s+version\s+\%\}', "#version {}".format(self.substitutions['VERSION']), source, flags=re.MULTILINE)

        for n, v in self.substitutions.items():
            source = source.replace('${'+str(n)+'}', str(v))

        for name, replc in self.uniforms_require_declaration.items():
            if name not in self.uniforms_declarations:
                self._serr('tag {{% uniform_block {} %}} not defined. Did you use Shader.declare_uniform()?'.format(name))
            source = source.replace(replc, self.uniforms_declarations[name])

        return source

    def _prepare_attributes(self):
        """
        finds attributes:
            in/out <type> <name>;

        and registers them at Shader.attributes
        """
        matches = re.findall(r'\b(in|out)\s+(\w+)\s+([\w]+).*?;',
                             self._precompiled_source,
                             flags=re.MULTILINE)
        self.attributes = {k: (s, t) for s, t, k in matches}

    def _prepare_uniform_blocks(self):
        """
        finds

            {% uniform_block <name> %}

        tags and registers them at Shader.uniform_blocks.

        raises:
        ShaderError: if an explicit uniform block declarations intersects with
                     a uniform block tag {% uniform_block <name> %}

        """
        def uniform_block_replacement(match):
            uniform_name = match.group(1)
            if uniform_name not in self.uniform_blocks:
                self.uniform_blocks.append(uniform_name)
            self.uniforms_require_declaration[uniform_name] = '/*--###GPUNOISE-PRECOMPILE-UNIFORM-TARGET-{}###--*/'.format(uniform_name)
            return self.uniforms_require_declaration[uniform_name]

        self._precompiled_source = re.sub(r'\{\%\s+uniform_block\s+([a-zA-Z0-9_]+)\s+\%\}',
                             uniform_block_replacement,
                             self._precompiled_source,
                             flags=re.MULTILINE)

        # read explicit uniform block declarations
        explicit_dtype = find_structs_as_dtype(self._precompiled_source)

        # there should be no explicit uniform declaration if there is
        # a {% uniform_block %} tag within the shader.
        intersection_uniform_block_declr = set(self.uniforms_require_declaration) & set(explicit_dtype)
        if len(intersection_uniform_block_declr):
            self._serr(('a uniform_block tag for "{}" was found. '
                        'But there is an explicit declaration within '
                        'glsl code defined as well.'
                        ).format(', '.join(intersection_uniform_block_declr)))

        self.uniform_dtype.update(explicit_dtype)
        self.uniform_blocks.extend(k for k in explicit_dtype if k not in self.uniform_blocks)

    def _serr(self, *args, **kwargs):
        raise ShaderError(self, *args, **kwargs)


class Program():
    """
    opengl render program representation
    """
    __LAST_USE_GL_ID = None

    def __init__(self):
        """
        initialize the state
        """
        self.shaders    = []
        self.gl_program_id = None
        self.uniform_block_index = {}
        self.uniform_dtype = None

    def use(self):
        """
        tells opengl state to use this program
        """
        if Program.__LAST_USE_GL_ID is not None and Program.__LAST_USE_GL_ID != self.gl_program_id:
            raise ProgramError('cannot use program {} since program {} is still in use'.format(
                self.gl_program_id, Program.__LAST_USE_GL_ID
            ))

        if self.gl_program_id != Program.__LAST_USE_GL_ID:
            glUseProgram(self.gl_program_id)
            Program.__LAST_USE_GL_ID = self.gl_program_id

    def unuse(self):
        """
        tells opengl state to unuse this program
        """
        if self.gl_program_id != Program.__LAST_USE_GL_ID:
            raise ProgramError('cannot unuse program since its not used.')

        glUseProgram(0)
        Program.__LAST_USE_GL_ID = None

    def delete(self):
        """
        deletes gl program if exists
        """
        if self.gl_program_id is not None:
            if self.gl_program_id == Program.__LAST_USE_GL_ID:
                self.unuse()
            glDeleteProgram(self.gl_program_id)
            self.gl_program_id = None

        for shader in self.shaders:
            shader.delete()

    def link(self):
        """
        links all shaders together
        """
        self.gl_program_id = glCreateProgram()

        if self.gl_program_id < 1:
            self.gl_program_id = None
            raise ProgramError('glCreateProgram returns an invalid id')

        # find uniform block declarations from other shaders
        # for implicit usage of {% uniform_block <name> %} tag
        self.uniform_dtype = {}
        for shader in self.shaders:
            self.uniform_dtype.update(shader.uniform_dtype)

        for shader in self.shaders:
            for name in shader.uniforms_require_declaration:
                if not name in shader.uniforms_declarations and name in self.uniform_dtype:
                    shader.declare_uniform(name, self.uniform_dtype[name])

            shader.compile()
            glAttachShader(self.gl_program_id, shader.gl_shader_id)
        glLinkProgram(self.gl_program_id)

        if not glGetProgramiv(self.gl_program_id, GL_LINK_STATUS):
            error_log = glGetProgramInfoLog(self.gl_program_id)
            self.delete()
            raise ProgramError(_decode_log(error_log))

        self._configure_uniform_blocks()

        return self.gl_program_id

    def declare_uniform(self, name, declr, variable=None):
        found_at_least_one = False
        for shader in self.shaders:
            if name in shader.uniform_blocks:
                shader.declare_uniform(name, declr, variable=variable)
                found_at_least_one = True

        if not found_at_least_one:
            raise ProgramError(('no uniform block "{}" found within program'.format(name)))

    def _configure_uniform_blocks(self):
        """
        configures uniform block cache and compares the block sizes
        reported by the driver with the declared dtypes.
        """
        self.uniform_block_index = {}
        for block_name, dtype in self.uniform_dtype.items():
            block_index = glGetUniformBlockIndex(self.gl_program_id, block_name)
            if block_index == GL_INVALID_INDEX:
                GPUNOISE_GL.warn(('could not receive uniform_block location "{}". '
                                  'Maybe it was never used within main() function?').format(block_name))
                GPUNOISE_GL.hint(('uniform blocks must be used at least once within the main() function of the shader. '
                                  'Otherwise, one cannot recieve block index by glGetUniformBlockIndex() function.'))
                continue

            data_size = np.zeros(1, dtype=np.int32)
            glGetActiveUniformBlockiv(self.gl_program_id, block_index, GL_UNIFORM_BLOCK_DATA_SIZE, data_size)
            if int(data_size[0]) != dtype.itemsize:
                raise ProgramError(('uniform block "{}" has {} bytes on the device '
                                    'but the declared dtype has {} bytes.').format(block_name, int(data_size[0]), dtype.itemsize))

            self.uniform_block_index[block_name] = block_index

    def uniform_block_binding(self, name, index):
        """ binds uniform block **name** to the buffer binding point **index**.
            **index** might be an object with a gl_buffer_base attribute """
        if name not in self.uniform_block_index:
            raise ProgramError('invalid uniform block name "{}".'.format(name))
        if hasattr(index, 'gl_buffer_base'):
            index = index.gl_buffer_base

        glUniformBlockBinding(self.gl_program_id, self.uniform_block_index[name], index)

def _decode_log(log):
    if isinstance(log, bytes):
        return log.decode('utf-8', 'replace')
    return str(log)
