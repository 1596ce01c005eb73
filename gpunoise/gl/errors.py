#-*- coding: utf-8 -*-
"""
root of all gpunoise exceptions.
"""

class GlError(Exception):
    """ base class of errors raised by gpunoise """
    @property
    def message(self):
        return self.args[0] if self.args else ''
