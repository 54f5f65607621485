# viewer.py

"""
================================================================================
LIVE SIMULATION VIEWER
================================================================================
A Pygame window that advances the simulation once per frame and draws a
top-down map of the current state.

Controls:
    Q / Esc       quit
    P             pause / resume
    Tab           cycle palette (terrain, vapor, flux, temperature, rain)
    W A S D       pan (the map wraps around like the world does)
    Mouse wheel   zoom
    Left mouse    pour water into the cell under the cursor

Usage:
    python viewer.py [path/to/config.json]
================================================================================
"""
import os
import sys
import json
import logging
import logging.config
import pygame

from watershed import shading
from watershed.loader import PARAMETERS_SECTION, ConfigError, parse_parameters, read_config
from watershed.runtime import Simulation

# --- Application Constants ---
DEFAULT_CONFIG_PATH = 'configs/config.json'
LOG_CONFIG_PATH = 'configs/logging_config.json'
PAN_SPEED_CELLS = 4
MIN_ZOOM = 1
MAX_ZOOM = 8
PAUSED_FRAME_DELAY_MS = 150
# Water added per frame while the mouse button is held.
INJECTION_AMOUNT = 2.0


class Camera:
    """Pan and integer zoom over a toroidal grid."""
    def __init__(self, grid_size: int, zoom: int):
        self.grid_size = grid_size
        self.zoom = max(MIN_ZOOM, min(MAX_ZOOM, zoom))
        # Grid cell drawn at the top-left corner of the window.
        self.x = 0
        self.y = 0

    def pan(self, dx: int, dy: int):
        self.x = (self.x + dx) % self.grid_size
        self.y = (self.y + dy) % self.grid_size

    def zoom_in(self):
        self.zoom = min(MAX_ZOOM, self.zoom + 1)

    def zoom_out(self):
        self.zoom = max(MIN_ZOOM, self.zoom - 1)

    def visible_cells(self, screen_width: int, screen_height: int) -> tuple:
        """
        Number of columns and rows needed to cover the window at the current
        zoom. Can exceed the grid size, in which case the map repeats.
        """
        cols = max(1, -(-screen_width // self.zoom))
        rows = max(1, -(-screen_height // self.zoom))
        return cols, rows

    def screen_to_grid(self, screen_x: int, screen_y: int) -> tuple:
        """Grid cell under a window pixel, wrapped onto the torus."""
        gx = (screen_x // self.zoom + self.x) % self.grid_size
        gy = (screen_y // self.zoom + self.y) % self.grid_size
        return gx, gy


def load_viewer_config(config_path: str, logger: logging.Logger) -> tuple:
    """
    Reads the configuration file once and splits it into the simulation
    parameters and the viewer's own `display` section.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file or its parameter table is invalid.
    """
    logger.info(f"Loading configuration from {config_path}")
    config = read_config(config_path)
    params = parse_parameters(config.get(PARAMETERS_SECTION, {}))
    display_config = config.get('display', {})
    if not isinstance(display_config, dict):
        raise ConfigError("'display' must be a JSON object")
    return params, display_config


class ViewerApp:
    """The main application class for the live viewer."""
    def __init__(self, config_path: str):
        self._setup_logging()
        self.logger.info("Viewer starting.")

        self.is_running = True
        self.is_paused = False
        self.palette_names = list(shading.PALETTES)
        self.palette_index = 0

        try:
            params, display_config = load_viewer_config(config_path, self.logger)
        except FileNotFoundError:
            self.logger.critical(f"Configuration file not found at {config_path}. Exiting.")
            sys.exit(1)
        except ConfigError as e:
            self.logger.critical(f"Invalid configuration in {config_path}: {e}. Exiting.")
            sys.exit(1)

        self.simulation = Simulation(params, logger=self.logger)
        self.camera = Camera(params.grid_size, display_config.get('zoom', 2))
        self.target_fps = display_config.get('fps', 60)

        self.logger.info("Initializing Pygame...")
        pygame.init()
        window = params.grid_size * self.camera.zoom
        self.screen = pygame.display.set_mode((window, window), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()

    def _setup_logging(self):
        """Initializes the logging system from a config file."""
        log_dir = 'logs'
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        with open(LOG_CONFIG_PATH, 'rt') as f:
            log_config = json.load(f)

        # Tell the logger where to create its file, overriding the JSON path.
        log_config['handlers']['file']['filename'] = os.path.join(log_dir, 'viewer.log')

        logging.config.dictConfig(log_config)
        self.logger = logging.getLogger(__name__)

    def run(self):
        """The main application loop."""
        while self.is_running:
            self.handle_events()
            self.update()
            self.draw()
            if self.is_paused:
                pygame.time.delay(PAUSED_FRAME_DELAY_MS)
            self.clock.tick(self.target_fps)

        self.logger.info(f"Exiting viewer at {self.simulation.clock.get_time_string()}.")
        pygame.quit()

    def handle_events(self):
        """Processes user input and other events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    self.is_running = False
                elif event.key == pygame.K_p:
                    self.is_paused = not self.is_paused
                    self.logger.info("Paused." if self.is_paused else "Resumed.")
                elif event.key == pygame.K_TAB:
                    self.palette_index = (self.palette_index + 1) % len(self.palette_names)
                    self.logger.info(f"Palette switched to '{self.palette_names[self.palette_index]}'.")
            elif event.type == pygame.MOUSEWHEEL:
                if event.y > 0:
                    self.camera.zoom_in()
                elif event.y < 0:
                    self.camera.zoom_out()

    def update(self):
        """Handles continuous input, then advances the simulation one tick."""
        keys = pygame.key.get_pressed()
        if keys[pygame.K_w]:
            self.camera.pan(0, -PAN_SPEED_CELLS)
        if keys[pygame.K_s]:
            self.camera.pan(0, PAN_SPEED_CELLS)
        if keys[pygame.K_a]:
            self.camera.pan(-PAN_SPEED_CELLS, 0)
        if keys[pygame.K_d]:
            self.camera.pan(PAN_SPEED_CELLS, 0)

        # Injection happens between ticks, never during one.
        if pygame.mouse.get_pressed()[0]:
            gx, gy = self.camera.screen_to_grid(*pygame.mouse.get_pos())
            self.simulation.inject_water(gx, gy, INJECTION_AMOUNT)

        if not self.is_paused:
            self.simulation.step()

    def draw(self):
        """Handles all rendering for the application."""
        palette = self.palette_names[self.palette_index]
        colors = shading.get_color_array(self.simulation.state, palette)

        # Cut the cells that cover the current window, starting at the
        # camera's top-left cell. The torus makes every pan a plain rotation
        # of the grid, and a window larger than the map simply repeats it.
        cols, rows = self.camera.visible_cells(*self.screen.get_size())
        colors = colors.take(range(self.camera.x, self.camera.x + cols), axis=0, mode='wrap')
        colors = colors.take(range(self.camera.y, self.camera.y + rows), axis=1, mode='wrap')

        surface = pygame.surfarray.make_surface(colors)
        size = (cols * self.camera.zoom, rows * self.camera.zoom)
        self.screen.blit(pygame.transform.scale(surface, size), (0, 0))

        status = "PAUSED" if self.is_paused else f"{self.clock.get_fps():.0f} fps"
        pygame.display.set_caption(
            f"Watershed | {self.simulation.clock.get_time_string()} | {palette} | {status}"
        )
        pygame.display.flip()


if __name__ == '__main__':
    config_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH
    app = ViewerApp(config_path)
    app.run()
