# frames per second counter

from time import perf_counter

from gpunoise.gl.common import Event

class Fps():
    """
    counts ticks and publishes the frame rate once per **interval**
    seconds through the on_fps event.

        fps = Fps()
        fps.on_fps.append(lambda value: window.set_title('{:.1f} FPS'.format(value)))
        # each frame
        fps.tick()
    """
    def __init__(self, interval=1.0, clock=perf_counter):
        self.interval = interval
        self.clock = clock
        self.on_fps = Event()
        self.fps = None
        self._frames = 0
        self.last_time = clock()

    def tick(self):
        self._frames += 1
        t = self.clock()
        dt = t - self.last_time
        if dt >= self.interval:
            self.fps = self._frames / dt
            self._frames = 0
            self.last_time = t
            self.on_fps(self.fps)
        return self.fps
