#!/usr/bin/env python3

import argparse
import logging

import gi
gi.require_version('Gtk', '3.0')
gi.require_version('Gdk', '3.0')
from gi.repository import Gtk, Gdk
from OpenGL.GL import *
from PIL import Image
import numpy as np

from .camera import ArcballCamera
from .config import ViewerConfig
from .cube import Cube
from .transforms import perspective_matrix

logger = logging.getLogger(__name__)

VERTEX_SHADER = """
#version 330 core
layout(location = 0) in vec3 pos;
layout(location = 1) in vec3 color;

uniform mat4 proj_view;

out vec3 vcolor;

void main()
{
    gl_Position = proj_view * vec4(pos, 1.0);
    vcolor = color;
}
"""

FRAGMENT_SHADER = """
#version 330 core
in vec3 vcolor;
out vec4 FragColor;

void main()
{
    FragColor = vec4(vcolor, 1.0);
}
"""


class CubeViewer(Gtk.Window):
    def __init__(self, config=None):
        Gtk.Window.__init__(self, title="Arcball Camera Cube Viewer")
        self.config = config or ViewerConfig()
        self.set_default_size(self.config.width, self.config.height)
        self.set_border_width(10)

        self.camera = ArcballCamera(
            self.config.base_view(),
            self.config.motion_speed,
            self.config.zoom_speed,
            self.config.screen(),
            dtype=self.config.dtype,
        )
        self.cube = None
        self.shader_program = None
        self.screenshot_requested = False

        self.mouse_last_x = 0
        self.mouse_last_y = 0
        self.mouse_rotating = False
        self.mouse_panning = False

        self.init_ui()
        self.connect("key-press-event", self.on_key_press)
        self.connect("destroy", self.on_destroy)

    def init_ui(self):
        vbox = Gtk.VBox(spacing=6)
        self.add(vbox)

        controls_hbox = Gtk.HBox(spacing=6)
        reset_btn = Gtk.Button(label="Reset View")
        reset_btn.connect("clicked", self.reset_view)
        controls_hbox.pack_start(reset_btn, False, False, 0)
        screenshot_btn = Gtk.Button(label="Save Screenshot")
        screenshot_btn.connect("clicked", self.request_screenshot)
        controls_hbox.pack_start(screenshot_btn, False, False, 0)
        self.status_label = Gtk.Label(label="")
        self.status_label.set_halign(Gtk.Align.START)
        controls_hbox.pack_start(self.status_label, True, True, 0)
        vbox.pack_start(controls_hbox, False, False, 0)

        self.gl_area = Gtk.GLArea()
        self.gl_area.set_size_request(320, 240)
        self.gl_area.connect("realize", self.on_gl_realize)
        self.gl_area.connect("unrealize", self.on_gl_unrealize)
        self.gl_area.connect("render", self.on_gl_render)
        self.gl_area.connect("resize", self.on_gl_resize)
        self.gl_area.set_has_depth_buffer(True)
        self.gl_area.set_auto_render(True)

        self.gl_area.add_events(
            Gdk.EventMask.BUTTON_PRESS_MASK |
            Gdk.EventMask.BUTTON_RELEASE_MASK |
            Gdk.EventMask.POINTER_MOTION_MASK |
            Gdk.EventMask.SCROLL_MASK |
            Gdk.EventMask.SMOOTH_SCROLL_MASK
        )
        self.gl_area.connect("button-press-event", self.on_mouse_press)
        self.gl_area.connect("button-release-event", self.on_mouse_release)
        self.gl_area.connect("motion-notify-event", self.on_mouse_motion)
        self.gl_area.connect("scroll-event", self.on_mouse_scroll)

        vbox.pack_start(self.gl_area, True, True, 0)
        self.update_status()

    def update_status(self):
        eye = self.camera.eye_position()
        self.status_label.set_text("Eye: (%.2f, %.2f, %.2f)" % (eye[0], eye[1], eye[2]))

    def on_key_press(self, widget, event):
        if event.keyval == Gdk.KEY_Escape:
            self.destroy()
            return True
        return False

    def on_mouse_press(self, widget, event):
        self.mouse_last_x = event.x
        self.mouse_last_y = event.y

        if event.button == 1:
            self.mouse_rotating = True
        elif event.button in (2, 3):
            self.mouse_panning = True

        return True

    def on_mouse_release(self, widget, event):
        if event.button == 1:
            self.mouse_rotating = False
        elif event.button in (2, 3):
            self.mouse_panning = False

        return True

    def on_mouse_motion(self, widget, event):
        if self.mouse_rotating:
            self.camera.rotate((self.mouse_last_x, self.mouse_last_y), (event.x, event.y))
            self.view_changed()
        elif self.mouse_panning:
            dx = event.x - self.mouse_last_x
            dy = event.y - self.mouse_last_y
            # pixel Y grows downward, camera Y grows upward
            self.camera.pan((dx, -dy), 1.0)
            self.view_changed()

        self.mouse_last_x = event.x
        self.mouse_last_y = event.y

        return True

    def on_mouse_scroll(self, widget, event):
        amount = 0.0
        if event.direction == Gdk.ScrollDirection.UP:
            amount = 1.0
        elif event.direction == Gdk.ScrollDirection.DOWN:
            amount = -1.0
        elif event.direction == Gdk.ScrollDirection.SMOOTH:
            ok, _, delta_y = event.get_scroll_deltas()
            if ok:
                amount = -delta_y

        if amount:
            self.camera.zoom(amount, self.config.zoom_elapsed)
            self.view_changed()
        return True

    def view_changed(self):
        self.update_status()
        self.gl_area.queue_render()

    def reset_view(self, widget):
        self.camera.reset()
        self.view_changed()

    def request_screenshot(self, widget):
        self.screenshot_requested = True
        self.gl_area.queue_render()

    def compile_shader(self, source, shader_type):
        shader = glCreateShader(shader_type)
        glShaderSource(shader, source)
        glCompileShader(shader)

        if not glGetShaderiv(shader, GL_COMPILE_STATUS):
            error = glGetShaderInfoLog(shader).decode()
            raise RuntimeError(f"Shader compilation failed: {error}")

        return shader

    def create_shader_program(self):
        vs = self.compile_shader(VERTEX_SHADER, GL_VERTEX_SHADER)
        fs = self.compile_shader(FRAGMENT_SHADER, GL_FRAGMENT_SHADER)

        program = glCreateProgram()
        glAttachShader(program, vs)
        glAttachShader(program, fs)
        glLinkProgram(program)

        if not glGetProgramiv(program, GL_LINK_STATUS):
            error = glGetProgramInfoLog(program).decode()
            raise RuntimeError(f"Program linking failed: {error}")

        glDeleteShader(vs)
        glDeleteShader(fs)

        return program

    def on_gl_realize(self, area):
        area.make_current()
        if area.get_error() is not None:
            logger.error("GL context creation failed: %s", area.get_error())
            return

        glEnable(GL_DEPTH_TEST)
        glClearColor(*self.config.clear_color)

        self.shader_program = self.create_shader_program()

        self.cube = Cube()
        self.cube.create_vao()

    def on_gl_unrealize(self, area):
        area.make_current()
        if self.cube:
            self.cube.delete()
            self.cube = None
        if self.shader_program:
            glDeleteProgram(self.shader_program)
            self.shader_program = None

    def on_gl_resize(self, area, width, height):
        # event coordinates are in logical pixels, the signal reports device pixels
        scale = area.get_scale_factor() or 1
        logical_width = max(1, width // scale)
        logical_height = max(1, height // scale)
        self.camera.update_screen(logical_width, logical_height)

    def render_scene(self, width, height):
        aspect = width / height if height > 0 else 1.0
        projection = perspective_matrix(self.config.fov, aspect, self.config.near, self.config.far)
        proj_view = projection @ self.camera.get_view() @ self.cube.get_model_matrix()

        glUseProgram(self.shader_program)
        proj_view_loc = glGetUniformLocation(self.shader_program, "proj_view")
        glUniformMatrix4fv(proj_view_loc, 1, GL_TRUE, proj_view.astype(np.float32))
        self.cube.draw()

    def on_gl_render(self, area, context):
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        if not self.cube or not self.shader_program:
            return True

        scale = area.get_scale_factor() or 1
        width = area.get_allocated_width() * scale
        height = area.get_allocated_height() * scale
        self.render_scene(width, height)
        glFlush()

        if self.screenshot_requested:
            self.screenshot_requested = False
            self.save_screenshot(width, height)
        return True

    def read_pixels(self, width, height):
        glPixelStorei(GL_PACK_ALIGNMENT, 1)
        pixels = glReadPixels(0, 0, width, height, GL_RGB, GL_UNSIGNED_BYTE)
        glPixelStorei(GL_PACK_ALIGNMENT, 4)
        img = np.frombuffer(pixels, dtype=np.uint8).reshape((height, width, 3))
        return np.flipud(img)

    def save_screenshot(self, width, height):
        path = self.config.screenshot_path
        try:
            Image.fromarray(self.read_pixels(width, height), "RGB").save(path)
        except (OSError, ValueError) as e:
            logger.error("Error saving screenshot to %s: %s", path, e)
            return
        logger.info("Saved screenshot to %s", path)

    def on_destroy(self, widget):
        Gtk.main_quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Orbit a colored cube with an arcball camera.")
    parser.add_argument("--width", type=int, default=None, help="Initial window width in pixels.")
    parser.add_argument("--height", type=int, default=None, help="Initial window height in pixels.")
    parser.add_argument("--motion-speed", dest="motion_speed", type=float, default=None,
                        help="Pan distance per pixel of drag.")
    parser.add_argument("--zoom-speed", dest="zoom_speed", type=float, default=None,
                        help="Zoom distance per scroll step.")
    parser.add_argument("--fov", type=float, default=None, help="Vertical field of view in degrees.")
    parser.add_argument("--eye", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"),
                        help="Initial camera position.")
    parser.add_argument("--screenshot", dest="screenshot_path", type=str, default=None,
                        help="Where 'Save Screenshot' writes its PNG.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = ViewerConfig.from_args(args)

    window = CubeViewer(config)
    window.show_all()
    Gtk.main()


if __name__ == "__main__":
    main()
