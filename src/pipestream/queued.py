""" A single-threaded execution context around a blocking writer. A
    :class:`PipeStreamWriter` is not safe to share between threads; a
    :class:`QueuedWriter` owns one background thread that performs every
    write in submission order, so any number of threads can hand it
    payloads without corrupting the stream.
"""

import queue
import threading

from .log import get_logger


log = get_logger(__name__)


class PendingWrite:
    """ Client-side handle for one queued operation, allowing the caller to
        block until the background thread has completed it.

        :ivar result: The return value of the operation, once complete.
        :ivar error: The exception the operation raised, if any.
    """

    def __init__(self, method, argument):

        self.method = method
        self.argument = argument
        self.result = None
        self.error = None
        self.event = threading.Event()


    def _run(self):

        try:
            if self.argument is _no_argument:
                self.result = self.method()
            else:
                self.result = self.method(self.argument)
        except Exception as e:
            self.error = e
            log.warning('queued_write_failed', error=str(e), error_type=type(e).__name__)

        self.event.set()


    def done(self):
        """ Return True if the operation is complete, otherwise return False.
        """

        return self.event.is_set()


    def wait(self, timeout=None):
        """ Block until the operation is complete, then return its result, or
            raise the exception it raised. If the *timeout* (in seconds)
            expires first, :class:`TimeoutError` is raised; the operation
            stays queued. A *timeout* of None blocks indefinitely.
        """

        if self.event.wait(timeout):
            pass
        else:
            raise TimeoutError('queued operation still pending after %s seconds' % (timeout))

        if self.error is not None:
            raise self.error

        return self.result


# end of class PendingWrite


_no_argument = object()
_stop = object()



class QueuedWriter:
    """ Serialize calls to a single *writer* through a dedicated background
        thread. Use :func:`send` to queue a payload without waiting, or
        :func:`write_object` to queue it and block until it is flushed.
        Failures do not stop the thread; each one is reported through the
        :class:`PendingWrite` it belongs to.
    """

    def __init__(self, writer, name=None):

        if name is None:
            name = 'QueuedWriter.%d' % (id(self))

        self.writer = writer
        self._outbox = queue.SimpleQueue()
        self._stopped = False
        self._lock = threading.Lock()

        self._thread = threading.Thread(target=self.run, name=name, daemon=True)
        self._thread.start()


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.stop()


    def _submit(self, method, argument=_no_argument):

        pending = PendingWrite(method, argument)

        with self._lock:
            if self._stopped:
                raise RuntimeError('QueuedWriter is stopped')
            self._outbox.put(pending)

        return pending


    def send(self, obj):
        """ Queue *obj* for writing and return a :class:`PendingWrite`.
        """

        return self._submit(self.writer.write_object, obj)


    def write_object(self, obj, timeout=None):
        """ Queue *obj* for writing and block until it has been written,
            returning the number of bytes written.
        """

        return self.send(obj).wait(timeout)


    def drain(self):
        """ Queue a drain wait behind every write submitted so far, and
            return a :class:`PendingWrite` that completes once the peer has
            read all of them.
        """

        return self._submit(self.writer.wait_for_drain)


    def wait_for_drain(self, timeout=None):
        self.drain().wait(timeout)


    def run(self):

        while True:
            pending = self._outbox.get()

            if pending is _stop:
                break

            pending._run()


    def stop(self, timeout=None):
        """ Finish every write queued so far, then stop the background
            thread. The writer and its transport are left open.
        """

        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            self._outbox.put(_stop)

        self._thread.join(timeout)


# end of class QueuedWriter


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
