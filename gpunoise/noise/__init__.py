"""
gpunoise.noise

the noise kernel: parameter block, glsl stages, numpy
reference and the renderer driving them.
"""
