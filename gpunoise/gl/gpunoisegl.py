#-*- coding: utf-8 -*-
"""
global gpunoise gl state and message facade.

all library messages go through GPUNOISE_GL so the
output looks the same everywhere:

    GPUNOISE_GL.warn('uniform block "Params" not used')
    GPUNOISE_GL.hint('use the block in main()')
    GPUNOISE_GL.debug('load shader', '...')

the messages are forwarded to the "gpunoise" logger. Set the
environment variable GPUNOISE_DEBUG=1 to see debug output.
"""
import logging
import os

from termcolor import colored

_STATE_COLORS = {
    'OK': 'green',
    'FAIL': 'red',
    '...': 'yellow',
}

class GpuNoiseGl():
    """
    holds the current context and routes messages
    to the logging module.
    """
    def __init__(self, logger_name='gpunoise'):
        self.CONTEXT = None
        self.logger = logging.getLogger(logger_name)
        self.DEBUG = os.environ.get('GPUNOISE_DEBUG', '0') not in ('', '0')
        if self.DEBUG:
            self.enable_debug()

    def enable_debug(self):
        """ attaches a stream handler and lowers the level to DEBUG """
        self.DEBUG = True
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter('%(name)s: %(message)s'))
            self.logger.addHandler(handler)
        self.logger.setLevel(logging.DEBUG)

    def debug(self, text, state=None):
        if state is not None:
            if state in _STATE_COLORS:
                state = colored(state, _STATE_COLORS[state])
            text = '[{}] {}'.format(state, text)
        self.logger.debug(text)

    def info(self, text):
        self.logger.info(text)

    def warn(self, text):
        self.logger.warning(text)

    def hint(self, text):
        self.logger.info('hint: {}'.format(text))

    def error(self, text):
        self.logger.error(text)

GPUNOISE_GL = GpuNoiseGl()
