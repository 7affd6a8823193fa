import numpy as np  # type: ignore
import pyaudio  # type: ignore

from . import mixer as M


class AudioInterface:
    """Plays a `mixer.Mixer` through a PyAudio output stream.

    The stream callback pulls `frames_per_buffer` frames from the mixer on the
    audio thread; channels are interleaved sample by sample.
    """

    def __init__(self, mix, device_index=None, frames_per_buffer=512,
                 logger=None):
        self.mix = mix
        self.logger = logger
        self.p = pyaudio.PyAudio()
        self.output_stream = self.p.open(
            output_device_index=device_index,
            format=pyaudio.paFloat32,
            channels=M.CHANNELS,
            rate=mix.rate,
            output=True,
            frames_per_buffer=frames_per_buffer,
            stream_callback=self.callback)

    def callback(self, in_data, frame_count, time_info, status):
        del in_data, time_info
        if status and self.logger:
            self.logger.debug('audio status=%s', status)
        buf = self.mix.render(frame_count)
        return np.ascontiguousarray(buf).tobytes(), pyaudio.paContinue

    def start(self):
        self.output_stream.start_stream()

    def close(self):
        if hasattr(self, 'output_stream'):
            self.output_stream.stop_stream()
            self.output_stream.close()
            del self.output_stream
        self.p.terminate()

    @classmethod
    def devices(cls):
        p = pyaudio.PyAudio()
        try:
            return [p.get_device_info_by_index(i)
                    for i in range(p.get_device_count())]
        finally:
            p.terminate()

    @classmethod
    def list_devices(cls):
        for i, dev in enumerate(cls.devices()):
            print('device_index={} "{}", input={}, output={}'.format(
                i, dev['name'], dev['maxInputChannels'],
                dev['maxOutputChannels']))

    @classmethod
    def get_index(cls, name):
        for i, dev in enumerate(cls.devices()):
            if dev['name'].startswith(name):
                return i


if __name__ == '__main__':
    AudioInterface.list_devices()
