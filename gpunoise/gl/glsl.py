#-*- coding: utf-8 -*-
"""
glsl code utilities

translates numpy dtypes into glsl uniform block declarations,
parses glsl uniform blocks back into numpy dtypes and checks
whether a dtype has the memory layout of a std140 uniform block.

    dtype = np.dtype([('size', np.float32, 2), ('frame', np.uint32), ('padding', np.uint32)])
    assert_std140(dtype, 'Params')
    render_uniform_block_from_dtype('Params', dtype, 'std140', variable='params')

results in

    layout (std140) uniform Params
    {
        vec2 size;
        uint frame;
        uint padding;
    } params;
"""
import numpy as np

from gpunoise.gl.errors import GlError
from gpunoise.gl.gpunoisegl import GPUNOISE_GL

import re

class GlslParseError(GlError):
    pass

class GlslRenderError(GlError):
    pass

class GlslLayoutError(GlError):
    pass

GLTYPY_NUMPY_DTYPE = {
    'mat2'  : (np.float32, (2, 2)),
    'mat3'  : (np.float32, (3, 3)),
    'mat4'  : (np.float32, (4, 4)),
    'dmat2' : (np.float64, (2, 2)),
    'dmat3' : (np.float64, (3, 3)),
    'dmat4' : (np.float64, (4, 4)),
    'bool'  : np.bool_,
    'float' : np.float32,
    'uint'  : np.uint32,
    'int'   : np.int32,
    'double': np.float64,
    'vec2'  : (np.float32, (2, )),
    'vec3'  : (np.float32, (3, )),
    'vec4'  : (np.float32, (4, )),
    'bvec2' : (np.bool_, (2, )),
    'bvec3' : (np.bool_, (3, )),
    'bvec4' : (np.bool_, (4, )),
    'uvec2' : (np.uint32, (2, )),
    'uvec3' : (np.uint32, (3, )),
    'uvec4' : (np.uint32, (4, )),
    'ivec2' : (np.int32, (2, )),
    'ivec3' : (np.int32, (3, )),
    'ivec4' : (np.int32, (4, )),
    'dvec2' : (np.float64, (2, )),
    'dvec3' : (np.float64, (3, )),
    'dvec4' : (np.float64, (4, )),
}

SUPPORTED_VECTOR_TYPES = {
    '<i4': 'int',
    '|b1': 'bool',
    '<u4': 'uint',
    '<f4': 'float',
    '<f8': 'double'
}

SUPPORTED_MATRIX_TYPES = {
    '<f4': 'mat',
    '<f8': 'dmat'
}

NPVECTOR_TO_GLVECTOR = {
    '<i4': 'ivec',
    '|b1': 'bvec',
    '<u4': 'uvec',
    '<f4': 'vec',
    '<f8': 'dvec'
}

def render_uniform_block_from_dtype(name, dtype, layout='std140', variable=None):
    """
    renders a glsl uniform block by a given dtype

    Arguments:
    ----
    - name the name of the uniform block
    - dtype corresponding dtype
    - layout memory layout qualifier
    - variable optional instance name

    layout (<layout>) uniform <name> {
        <dtype>
    } <variable>;
    """
    gl_code = "layout ({}) uniform {}\n{{\n".format(layout, name)
    gl_code += render_struct_items_from_dtype(dtype)

    if variable is not None:
        gl_code += "}} {};\n".format(variable)
    else:
        gl_code += '};\n'

    return gl_code

def render_struct_items_from_dtype(dtype):
    """
    renders a string of glsl code which represents the data declaration
    of a structure.

    Example:
    --------
    dtype = np.dtype([
        ('a', np.float32),
        ('b', (np.float32, (4, 4))),
        ('c', np.int32, 2),
    ])
    render_struct_items_from_dtype(dtype)

    Result:
    -------
        float a;
        mat4 b;
        ivec2 c;

    Raises:
    -------
    GlslRenderError: whenever a field of the dtype could not
                     be transformed to glsl.
    """
    gl_code = ''

    for ndeclr in dtype.descr:
        shape = ndeclr[2] if len(ndeclr) > 2 else (1, )
        field, dtype_descr = ndeclr[0], ndeclr[1]

        if isinstance(dtype_descr, list):
            raise GlslRenderError('cannot render field "{}". Nested structures are not supported.'.format(field))

        # scalar or vector field type
        if len(shape) == 1:
            if not dtype_descr in SUPPORTED_VECTOR_TYPES:
                raise GlslRenderError((
                    'invalid type ({}) declaration in dtype field "{}".'
                    ' Supported {} types are: {}'
                ).format(dtype_descr,
                         field,
                         ('vector' if shape[0] > 1 else 'scalar'),
                         ', '.join(SUPPORTED_VECTOR_TYPES.values())))

            # check vector size
            if shape[0] == 1:
                gl_type = SUPPORTED_VECTOR_TYPES[dtype_descr]
            elif shape[0] < 5:
                gl_type = '{}{}'.format(NPVECTOR_TO_GLVECTOR[dtype_descr], shape[0])
            else:
                raise GlslRenderError((
                    'invalid type declaration in dtype field "{}".'
                    ' {} components declrared but maximum is 4.'
                ).format(field, shape[0]))

            gl_code += "\t{} {};\n".format(gl_type, field)

        # matrix types
        elif len(shape) == 2:

            # matrix size check
            if shape[0] > 4 or shape[1] > 4:
                raise GlslRenderError((
                    'invalid type declaration in dtype field "{}": '
                    'Matrix dimensions {}x{} exceed maximum of 4x4'
                ).format(field, shape[0], shape[1]))

            # matrix type check
            if dtype_descr not in SUPPORTED_MATRIX_TYPES:
                raise GlslRenderError((
                    'invalid type ({}) declaration in dtype field "{}". '
                    'Supported matrix types: {}'
                ).format(dtype_descr, field, ', '.join('{}={}'.format(*a) for a in SUPPORTED_MATRIX_TYPES.items())))

            # create matN or matNxM as well as dmatN or dmatNxM
            dimensions = '{}x{}'.format(*shape) if shape[0] != shape[1] else shape[0]
            gl_code += "\t{}{} {};\n".format(SUPPORTED_MATRIX_TYPES[dtype_descr], dimensions, field)

        else:
            raise GlslRenderError('unsupported field type in field "{}": {}'.format(field, dtype_descr))

    return gl_code

def find_structs_as_dtype(gl_code, keyword='uniform'):
    """ extract numpy dtype for many uniform block
        declarations from a given glsl code """
    uniform_dtypes = {}
    matches = re.findall(r'\s*'+re.escape(keyword)+r'\s+(\w+)\s*\{(.*?)\}\s*(\w*)\s*;',
                         gl_code,
                         flags=re.S)
    for match in matches:
        dtype_members = struct_fields_to_dtype(match[1])
        uniform_dtypes[match[0]] = np.dtype(dtype_members)

    return uniform_dtypes

def struct_fields_to_dtype(struct_declr):
    declr_matches = re.findall(r'\s*(\w+)\s*(\w+)\s*;', struct_declr, flags=re.S)
    dtype_members = []
    for (declr_type, declr_name) in declr_matches:
        if not declr_type in GLTYPY_NUMPY_DTYPE:
            raise GlslParseError((
                'invalid struct: member "{}" has unsupported type "{}". '
                'Supported types are: {}'
            ).format(declr_name, declr_type, ', '.join(GLTYPY_NUMPY_DTYPE)))

        if type(GLTYPY_NUMPY_DTYPE[declr_type]) is tuple:
            dtype_members.append((declr_name, GLTYPY_NUMPY_DTYPE[declr_type][0], GLTYPY_NUMPY_DTYPE[declr_type][1]))
        else:
            dtype_members.append((declr_name, GLTYPY_NUMPY_DTYPE[declr_type]))
    return dtype_members

def std140_layout(dtype):
    """
    computes the offsets which the std140 rules of the OpenGL
    specification (sec 7.6.2.2) assign to the fields of a
    uniform block described by **dtype**.

    returns a list of (field, offset) tuples and the size of
    the block in bytes. The block size is rounded up to 16 bytes.

    Example:
    --------
    dtype = np.dtype([('a', np.float32), ('b', np.float32, 3)])
    std140_layout(dtype)

    Result:
    -------
    ([('a', 0), ('b', 16)], 32)
    """
    offset = 0
    layout = []
    for field in dtype.names:
        base_alignment, size = _std140_field(field, dtype.fields[field][0])
        offset = _round_up(offset, base_alignment)
        layout.append((field, offset))
        offset += size

    return layout, _round_up(offset, 16)

def assert_std140(dtype, name='block'):
    """
    raises GlslLayoutError if the memory layout of **dtype** does not
    match the std140 layout of the uniform block it would render to.
    Numpy packs fields without alignment, so padding fields must be
    declared explicitly.
    """
    layout, block_size = std140_layout(dtype)
    for field, offset in layout:
        field_offset = dtype.fields[field][1]
        if field_offset != offset:
            GPUNOISE_GL.warn('uniform block missalignment - Please checkout https://www.opengl.org/registry/doc/glspec45.core.pdf sec 7.6.2.2.')
            for line in render_uniform_block_from_dtype(name, dtype).split("\n"):
                GPUNOISE_GL.warn("\t\t{}".format(line))
            if dtype.fields[field][0].shape == (3, ):
                GPUNOISE_GL.hint('in OpenGL a vec3 has an alignment of 16 bytes. One can add a padding before vec3 to provide a compatible alignment.')
            raise GlslLayoutError((
                'field "{}" of uniform block "{}" starts at byte {} '
                'but std140 requires byte {}.'
            ).format(field, name, field_offset, offset))

    if dtype.itemsize != block_size:
        raise GlslLayoutError((
            'uniform block "{}" has {} bytes but std140 requires {} bytes. '
            'Add explicit padding fields to the dtype.'
        ).format(name, dtype.itemsize, block_size))

    return block_size

def _std140_field(field, field_dtype):
    """ returns base alignment and size of a single field """
    if field_dtype.names is not None:
        raise GlslLayoutError('field "{}": nested structures are not supported.'.format(field))

    base, shape = field_dtype.base, field_dtype.shape
    if base.str not in SUPPORTED_VECTOR_TYPES:
        raise GlslLayoutError('field "{}": unsupported type {}.'.format(field, base.str))

    # bools are 4 bytes in glsl
    n = 8 if base.str == '<f8' else 4

    if len(shape) == 0 or shape == (1, ):
        return n, n
    if len(shape) == 1 and shape[0] < 5:
        return _vector_alignment(shape[0], n), shape[0] * n
    if len(shape) == 2 and base.str in SUPPORTED_MATRIX_TYPES:
        # a matrix is stored as an array of column vectors,
        # each padded to the alignment of a vec4.
        column_alignment = _round_up(_vector_alignment(shape[1], n), 16)
        return column_alignment, shape[0] * column_alignment

    raise GlslLayoutError('field "{}": unsupported shape {}.'.format(field, shape))

def _vector_alignment(components, n):
    return 2 * n if components == 2 else 4 * n if components > 2 else n

def _round_up(value, alignment):
    return (value + alignment - 1) // alignment * alignment
