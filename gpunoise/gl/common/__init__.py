#-*- coding: utf-8 -*-
"""
Contains several common objects and helper functions
"""

class Event(list):
    """
    An event is a list of callbacks which are invoked
    if the event was invoked.

        my_event = Event()
        my_event.append(blurp)
        my_event('first arg', 'and so on...')

    """
    OVERFLOW = 163

    def __call__(self, *args, **kwargs):
        """ invokes listeners l with arguments l(*args, **kwargs)"""
        for l in list(self):
            l(*args, **kwargs)

    def append(self, callback):
        if len(self) > Event.OVERFLOW:
            raise OverflowError('too many listeners ({})'.format(len(self)))
        super().append(callback)

    def once(self, callback):
        """ registers a callback which is removed after its first invocation """
        def _delete_wrapper(*args, **kwargs):
            self.remove(_delete_wrapper)
            callback(*args, **kwargs)
        self.append(_delete_wrapper)
        return _delete_wrapper
