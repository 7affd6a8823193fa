"""Streams scene frames to websockets & receives commands. Also serves static.

Every periodic callback has its own websocket path. Its return value (a
JSON serializable dict, or None to skip the frame) is sent to all connected
sockets `fps` times a second. Text messages `{"command": "<name>"}` received
on any socket call the callback registered with `add_command()`.
"""

import asyncio
import collections
import functools
import inspect
import json
import os
import time
import traceback
import weakref

from aiohttp import web, WSMsgType, WSCloseCode

from . import util


PeriodicCallback = collections.namedtuple(
    'PeriodicCallback', ('websocket_path', 'callback', 'fps'))


class Server:

    def __init__(self, static_dir, logger, index_html='index.html'):
        self.static_dir = static_dir
        self.logger = logger
        self.stats = util.StreamingStats(logger)
        self.index_html = index_html
        self.periodic_callbacks = {}
        self.commands = {}
        # (elements are WeakSet)
        self.websockets = {}
        self.routes = []
        self.key_counter = util.KeyCounter()
        self.running = False

    def run_periodically(self, periodic_callback):
        assert periodic_callback.websocket_path not in self.periodic_callbacks
        self.periodic_callbacks[
            periodic_callback.websocket_path] = periodic_callback

    def add_command(self, name, callback):
        """`callback` takes no arguments, can be a coroutine function."""
        assert name not in self.commands, name
        self.commands[name] = callback

    async def websocket_handler(self, websocket_path, request):
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        self.websockets[websocket_path].add(ws)
        self.logger.info('%s : websocket connected', websocket_path)
        try:
            await self.websocket_loop(websocket_path, ws)
        finally:
            self.websockets[websocket_path].discard(ws)
        return ws

    def call_create_task(self, function_or_coroutine, *args, **kwargs):
        if inspect.iscoroutinefunction(function_or_coroutine):
            asyncio.get_event_loop().create_task(
                function_or_coroutine(*args, **kwargs))
        else:
            function_or_coroutine(*args, **kwargs)

    def should_log(self, data):
        self.key_counter(data)
        for k in data:
            if self.key_counter.counts[k] == 5:
                self.logger.warning('Temporarily ignoring too frequent: %s', k)
        return all(self.key_counter.counts[k] < 5 for k in data)

    def handle_message(self, websocket_path, text):
        """Dispatches a `{"command": name}` message, returns success."""
        try:
            data = util.deserialize(text)
        except json.JSONDecodeError:
            self.logger.warning('%s : cannot decode %r', websocket_path, text)
            return False
        if not isinstance(data, dict) or 'command' not in data:
            self.logger.warning('%s : not a command %r', websocket_path, text)
            return False
        name = data['command']
        if self.should_log(data):
            self.logger.info('%s, received command: %s', websocket_path, name)
        callback = self.commands.get(name)
        if callback is None:
            self.logger.warning('%s : unknown command %r', websocket_path, name)
            return False
        self.call_create_task(callback)
        return True

    async def websocket_loop(self, websocket_path, ws):
        async for msg in ws:
            try:
                if msg.type == WSMsgType.TEXT:
                    self.handle_message(websocket_path, msg.data)
                elif msg.type == WSMsgType.ERROR:
                    self.logger.warning(
                        'ws closed with exception %s', ws.exception())
                else:
                    self.logger.debug('msg.type=%s', msg.type)
            except Exception as e:
                self.logger.error('uncaught exception : %s', e)
                self.logger.warning(traceback.format_exc())

    async def index(self, request):
        return web.FileResponse(os.path.join(self.static_dir, self.index_html))

    def init_app(self):
        self.app = web.Application()
        self.routes.append(web.get('/', self.index))
        for websocket_path in self.periodic_callbacks:
            self.websockets[websocket_path] = weakref.WeakSet()
            self.routes.append(web.get(
                websocket_path,
                functools.partial(self.websocket_handler, websocket_path)))
        self.routes.append(web.static('/', self.static_dir, name='static'))
        self.app.add_routes(self.routes)
        self.runner = web.AppRunner(self.app)

    async def start(self, address, port):
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, address, port)
        await self.site.start()

    def stop(self):
        self.running = False
        asyncio.get_event_loop().stop()

    async def safe_send_bytes(self, name, ws, data):
        try:
            await ws.send_bytes(data)
        except BrokenPipeError:
            self.logger.warning('broken pipe : %s', name)
            self.websockets[name].discard(ws)
        except ConnectionResetError:
            self.logger.warning('connection reset : %s', name)
            self.websockets[name].discard(ws)
        except Exception as e:
            self.logger.warning('other exception "%s" : %s',
                                e.__class__.__name__, name)

    def frame_data(self, periodic_callback):
        """Serialized frame, None if skipped or failed (error is logged)."""
        try:
            data = periodic_callback.callback()
            if data is None:
                return None
            return util.serialize(data)
        except Exception as e:
            self.logger.error('%s frame ERROR: %r',
                              periodic_callback.websocket_path, e)
            self.logger.warning(traceback.format_exc())
            return None

    async def periodic_loop(self, periodic_callback):
        t0 = time.time()
        name = periodic_callback.websocket_path
        while self.running:
            dt = 1 / periodic_callback.fps - (time.time() - t0)
            await asyncio.sleep(max(0, dt))
            t0 = time.time()
            data = self.frame_data(periodic_callback)
            if data is None:
                continue
            self.stats('periodic_{}'.format(name), data)
            for ws in list(self.websockets[name]):
                await self.safe_send_bytes(name, ws, data)

    def exception_handler(self, loop, context):
        msg = context.get('exception', context['message'])
        self.logger.error('caught exception: %s', msg)

    def run(self, address='localhost', port=8080, startup=(), shutdown=()):
        """Serves until stopped.

        `startup` callables/coroutine functions are called once the server
        listens, `shutdown` callables when it goes down.
        """
        self.init_app()
        self.stats.catch_ctrlc(self.stop)

        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        loop.set_exception_handler(self.exception_handler)

        loop.run_until_complete(self.start(address, port))

        self.running = True
        periodic_tasks = {}
        for websocket_path in self.periodic_callbacks:
            periodic_tasks[websocket_path] = loop.create_task(
                self.periodic_loop(self.periodic_callbacks[websocket_path]))
        for callback in startup:
            self.call_create_task(callback)

        self.logger.info('started server on http://%s:%d', address, port)
        try:
            loop.run_forever()
        except KeyboardInterrupt:
            print()
        finally:
            self.logger.info('SHUTTING DOWN...')
            self.running = False
            for callback in shutdown:
                callback()
            for task in periodic_tasks.values():
                loop.run_until_complete(task)
            for wss in self.websockets.values():
                for ws in list(wss):
                    loop.run_until_complete(ws.close(
                        code=WSCloseCode.GOING_AWAY,
                        message=b'Server shutdown'))
            loop.run_until_complete(self.runner.cleanup())

            loop.close()
