#!/usr/bin/env python3
"""
Universe simulator application entry point: viewport, inspector and key bindings.

What this module does
- Creates a Universe (the simulation context) from a JSON template.
- Opens a Pygame viewport that draws the bodies and forecast markers from a
  top-down camera, and handles keys, picking, panning and zoom.
- Opens a Dear PyGui inspector for the universe settings and the selected body.

Loop model
- One cooperative frame loop on the main thread drives everything: Pygame events,
  universe.update(real_dt), drawing, and one Dear PyGui frame. There are no
  background threads, so the universe needs no locking.

Keys (viewport window)
- U: toggle active        T: force one tick      R: reset to startup bodies
- D: forecast             C: clear forecast      X: despawn all bodies
- F: fit camera           Arrows: pan            Wheel: zoom      Click: select

Running
1) Install: `pip install -e .`
2) Run: `python universe_sim.py [--template two_body.json] [--log-level DEBUG]`
"""

import argparse
import logging
import time
from typing import Dict, List, Optional, Tuple

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from universe.camera import Camera
from universe.constants import (
    BACKGROUND_COLOR,
    BODY_RADIUS_PX,
    DEFAULT_BODY_COLOR,
    GRID_COLOR,
    HUD_TEXT_COLOR,
    MARKER_RADIUS_PX,
    PICK_RADIUS_PX,
    SAFE_COORD_LIMIT,
    SELECTION_COLOR,
    TARGET_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from universe.errors import ConfigurationError
from universe.markers import MarkerPool
from universe.presets_loader import DEFAULT_TEMPLATE, list_templates
from universe.simulation import Universe
from universe.vector_utils import Vec3

logger = logging.getLogger("universe_sim")

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


class ForecastMarker:
    """A dot drawn at one predicted position."""
    __slots__ = ("position", "color")

    def __init__(self, position: Vec3, color: Tuple[int, int, int]):
        self.position = position
        self.color = color


# ============================================================
# Pygame Viewport
# ============================================================

class PygameRenderer:
    """
    Pygame viewport: draws bodies and forecast markers, handles viewport input.
    """
    def __init__(self, app: "SimulatorApp"):
        self.app = app
        self.camera = Camera(center=(0.0, 0.0))
        self.surface = None
        self.clock = None
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.pan_speed_keys = 600  # pixels per second
        self.markers: MarkerPool[ForecastMarker] = MarkerPool(
            create=lambda body_id, pos: ForecastMarker(pos, self._color_of(body_id)),
            move=self._move_marker,
            destroy=lambda marker: None,
        )

    def open(self):
        pygame.init()
        pygame.display.set_caption("Universe Simulator - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.auto_frame_camera()

    def close(self):
        pygame.quit()

    def auto_frame_camera(self):
        self.camera.fit(b.position for b in self.app.universe.body_states())

    def _color_of(self, body_id: str) -> Tuple[int, int, int]:
        return self.app.body_colors.get(body_id, DEFAULT_BODY_COLOR)

    def _move_marker(self, marker: ForecastMarker, body_id: str, position: Vec3):
        marker.position = position
        marker.color = self._color_of(body_id)

    def select_body_at(self, screen: Tuple[int, int]) -> Optional[str]:
        best_id = None
        best_d2 = PICK_RADIUS_PX * PICK_RADIUS_PX
        for b in self.app.universe.body_states():
            sx, sy = self.camera.world_to_screen(b.position)
            d2 = (sx - screen[0]) ** 2 + (sy - screen[1]) ** 2
            if d2 <= best_d2:
                best_d2 = d2
                best_id = b.id
        return best_id

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.pan_pixels(self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.pan_pixels(-self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.pan_pixels(0, self.pan_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.pan_pixels(0, -self.pan_speed_keys * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.app.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                self.app.handle_key(event.key)

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0/1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    mouse = pygame.mouse.get_pos()
                    picked = self.select_body_at(mouse)
                    if picked is not None:
                        self.app.select(picked)
                    else:
                        self.dragging_background = True
                        self.drag_start_screen = mouse
                elif event.button in (2, 3):
                    self.dragging_background = True
                    self.drag_start_screen = pygame.mouse.get_pos()

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (1, 2, 3):
                    self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION:
                if self.dragging_background:
                    mouse = pygame.mouse.get_pos()
                    dx = mouse[0] - self.drag_start_screen[0]
                    dy = mouse[1] - self.drag_start_screen[1]
                    self.camera.pan_pixels(dx, dy)
                    self.drag_start_screen = mouse

    def draw_axes(self, surf):
        w, h = self.camera.viewport_size
        ox, oz = self.camera.world_to_screen((0.0, 0.0, 0.0))
        if 0 <= ox <= w:
            pygame.draw.line(surf, GRID_COLOR, (ox, 0), (ox, h), 1)
        if 0 <= oz <= h:
            pygame.draw.line(surf, GRID_COLOR, (0, oz), (w, oz), 1)

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)
        self.draw_axes(surf)

        for marker in self.markers.markers:
            pt = _safe_point(self.camera.world_to_screen(marker.position))
            if pt:
                gfxdraw.filled_circle(surf, pt[0], pt[1], MARKER_RADIUS_PX, marker.color)

        selected = self.app.selected_id
        for b in self.app.universe.body_states():
            pt = _safe_point(self.camera.world_to_screen(b.position))
            if pt is None:
                continue
            gfxdraw.filled_circle(surf, pt[0], pt[1], BODY_RADIUS_PX, b.color)
            gfxdraw.aacircle(surf, pt[0], pt[1], BODY_RADIUS_PX, (0, 0, 0))
            if b.id == selected:
                gfxdraw.aacircle(surf, pt[0], pt[1], BODY_RADIUS_PX + 4, SELECTION_COLOR)

        universe = self.app.universe
        draw_text(surf, "U: run/pause | T: step | R: reset | D: forecast | C: clear | X: despawn | F: fit",
                  10, 10, HUD_TEXT_COLOR)
        draw_text(surf, f"[{'Active' if universe.active else 'Paused'}]  bodies: {len(universe.store)}"
                        f"  markers: {len(self.markers)}  G: {universe.config.gravitational_constant:g}",
                  10, 30, HUD_TEXT_COLOR)
        if self.app.status:
            draw_text(surf, self.app.status, 10, 50, HUD_TEXT_COLOR)

        pygame.display.flip()


_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if _cached_font is None:
        if not pygame.font.get_init():
            pygame.font.init()
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


def _safe_point(pt):
    x, y = pt
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


# ============================================================
# Dear PyGui Inspector
# ============================================================

class Inspector:
    """
    Dear PyGui inspector: universe settings, command buttons and the selected body.
    """
    def __init__(self, app: "SimulatorApp"):
        self.app = app
        self._last_selected: Optional[str] = None
        self._sync_every = 6  # frames

    def build(self):
        dpg.create_context()
        dpg.create_viewport(title="Universe Simulator - Inspector", width=420, height=620)

        with dpg.window(label="Universe", width=400, height=600, pos=(10, 10), tag="main_window"):
            templates = dict((display, fn) for fn, display in list_templates())
            with dpg.group(horizontal=True):
                dpg.add_text("Template:")
                dpg.add_combo(list(templates), width=200, tag="template_combo",
                              default_value=next(iter(templates), ""))
                dpg.add_button(label="Load",
                               callback=lambda: self.app.load_template(templates.get(dpg.get_value("template_combo"))))
            dpg.add_separator()

            dpg.add_checkbox(label="Active", tag="active", callback=lambda s, a: self.app.toggle_active())
            dpg.add_input_float(label="Gravitational constant", tag="gravitational_constant",
                                format="%.5f", step=0.01, on_enter=True,
                                callback=lambda s, a: self.app.configure(gravitational_constant=a))
            dpg.add_input_float(label="Tick interval (ms)", tag="tick_interval_ms", step=1.0, on_enter=True,
                                callback=lambda s, a: self.app.configure(tick_interval_ms=a))
            dpg.add_input_int(label="Forecast steps", tag="forecast_steps", step=100, on_enter=True,
                              callback=lambda s, a: self.app.configure(forecast_steps=a))

            with dpg.group(horizontal=True):
                dpg.add_button(label="Step (T)", callback=self.app.force_tick)
                dpg.add_button(label="Reset (R)", callback=self.app.reset)
                dpg.add_button(label="Despawn all (X)", callback=self.app.despawn_all)
            with dpg.group(horizontal=True):
                dpg.add_button(label="Forecast (D)", callback=self.app.forecast)
                dpg.add_button(label="Clear forecast (C)", callback=self.app.clear_forecast)
                dpg.add_button(label="Fit camera (F)", callback=self.app.renderer.auto_frame_camera)

            dpg.add_separator()
            dpg.add_text("Selected body: none", tag="sel_title")
            dpg.add_text("", tag="sel_mass")
            dpg.add_input_floatx(label="Position", tag="sel_position", size=3, format="%.4f")
            dpg.add_input_floatx(label="Velocity", tag="sel_velocity", size=3, format="%.4f")
            dpg.add_button(label="Apply to selected", callback=self._apply_selected)

            dpg.add_separator()
            dpg.add_text("", tag="status")

        dpg.setup_dearpygui()
        dpg.show_viewport()

    def close(self):
        dpg.destroy_context()

    def _apply_selected(self):
        position = dpg.get_value("sel_position")[:3]
        velocity = dpg.get_value("sel_velocity")[:3]
        self.app.edit_selected(tuple(position), tuple(velocity))

    def sync(self):
        if dpg.get_frame_count() % self._sync_every:
            return
        universe = self.app.universe
        config = universe.config
        dpg.set_value("active", universe.active)
        dpg.set_value("gravitational_constant", config.gravitational_constant)
        dpg.set_value("tick_interval_ms", config.tick_interval_ms)
        dpg.set_value("forecast_steps", config.forecast_steps)
        dpg.set_value("status", self.app.status)

        body = self.app.selected_body()
        if body is None:
            dpg.set_value("sel_title", "Selected body: none")
            dpg.set_value("sel_mass", "")
            self._last_selected = None
            return
        dpg.set_value("sel_title", f"Selected body: {body.name} ({body.id})")
        dpg.set_value("sel_mass", f"Mass: {body.mass:g}")
        # Only overwrite the edit fields while the body is running or newly selected
        if universe.active or body.id != self._last_selected:
            dpg.set_value("sel_position", list(body.position))
            dpg.set_value("sel_velocity", list(body.velocity))
        self._last_selected = body.id


# ============================================================
# Application
# ============================================================

class SimulatorApp:
    """Routes viewport keys and inspector widgets to Universe commands."""

    def __init__(self, universe: Universe):
        self.universe = universe
        self.running = True
        self.selected_id: Optional[str] = None
        self.status = ""
        self.body_colors: Dict[str, Tuple[int, int, int]] = {}
        self.renderer = PygameRenderer(self)
        self.inspector = Inspector(self)
        self._refresh_colors()
        self._keymap = {
            pygame.K_u: self.toggle_active,
            pygame.K_t: self.force_tick,
            pygame.K_r: self.reset,
            pygame.K_d: self.forecast,
            pygame.K_c: self.clear_forecast,
            pygame.K_x: self.despawn_all,
            pygame.K_f: self.renderer.auto_frame_camera,
        }

    def _set_status(self, msg: str):
        self.status = msg

    def _refresh_colors(self):
        self.body_colors = {b.id: b.color for b in self.universe.body_states()}

    def handle_key(self, key):
        action = self._keymap.get(key)
        if action is not None:
            action()

    def select(self, body_id: Optional[str]):
        self.selected_id = body_id

    def selected_body(self):
        if self.selected_id is None or self.selected_id not in self.universe.store:
            return None
        return self.universe.get_body(self.selected_id)

    # -----------------------
    # Commands
    # -----------------------

    def toggle_active(self):
        active = self.universe.toggle_active()
        self._set_status("Universe active." if active else "Universe paused.")

    def force_tick(self):
        self.universe.force_tick()
        self._set_status("Stepped one tick.")

    def reset(self):
        self.universe.reset()
        self._refresh_colors()
        self._set_status("Reset to startup bodies.")

    def despawn_all(self):
        self.universe.despawn_all()
        self.selected_id = None
        self._set_status("Despawned all bodies.")

    def forecast(self):
        started = time.perf_counter()
        result = self.universe.request_forecast()
        reused, created, destroyed = self.renderer.markers.reconcile(result)
        elapsed = time.perf_counter() - started
        self._set_status(f"Forecast {result.steps} steps in {elapsed:.2f}s "
                         f"(markers reused {reused}, created {created}, removed {destroyed}).")

    def clear_forecast(self):
        self.universe.clear_forecast()
        removed = self.renderer.markers.clear()
        self._set_status(f"Cleared {removed} forecast markers.")

    def configure(self, **changes):
        try:
            self.universe.configure(**changes)
        except ConfigurationError as exc:
            logger.warning("Rejected edit: %s", exc)
            self._set_status(f"Rejected: {exc}")
            return
        self._set_status("Settings updated.")

    def edit_selected(self, position: Vec3, velocity: Vec3):
        if self.selected_body() is None:
            self._set_status("Select a body first.")
            return
        try:
            self.universe.set_body_position(self.selected_id, position)
            self.universe.set_body_velocity(self.selected_id, velocity)
        except ConfigurationError as exc:
            logger.warning("Rejected edit: %s", exc)
            self._set_status(f"Rejected: {exc}")
            return
        self._set_status(f"Updated {self.selected_id}.")

    def load_template(self, file_name: Optional[str]):
        if not file_name:
            return
        try:
            universe = Universe.from_template(file_name)
        except ConfigurationError as exc:
            logger.warning("Template %s rejected: %s", file_name, exc)
            self._set_status(f"Template rejected: {exc}")
            return
        self.universe = universe
        self.selected_id = None
        self.renderer.markers.clear()
        self._refresh_colors()
        self.renderer.auto_frame_camera()
        self._set_status(f"Loaded template: {file_name}")

    # -----------------------
    # Frame loop
    # -----------------------

    def run(self):
        self.renderer.open()
        self.inspector.build()
        last_time = time.perf_counter()
        try:
            while self.running and dpg.is_dearpygui_running():
                now = time.perf_counter()
                real_dt = now - last_time
                last_time = now

                self.renderer.handle_events(real_dt)
                self.universe.update(real_dt)
                self.renderer.draw()
                self.inspector.sync()
                dpg.render_dearpygui_frame()

                self.renderer.clock.tick(TARGET_FPS)
        finally:
            self.inspector.close()
            self.renderer.close()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive N-body universe simulator.")
    parser.add_argument("--template", default=DEFAULT_TEMPLATE,
                        help="template file name in universe/templates, or a path to a JSON template")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)
    universe = Universe.from_template(args.template)
    SimulatorApp(universe).run()


if __name__ == "__main__":
    main()
