# visualization.py
"""
Handles the visualization of the collision simulation using Pygame.
"""
import logging
import pygame
from typing import Dict, Any, Optional, Tuple

from constants import WINDOW_TITLE, BACKGROUND_COLOR, BORDER_COLOR, BORDER_WIDTH
from controls import ControlSurface, InputEvent
from particle import Particle
from simulation import Simulation

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, width: int, height: int, vis_params: Optional[dict] = None):
#     - Inputs:
#       - width, height: size of the container, which is also the window size.
#       - vis_params: the "visualization" section of config.json.
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - handle_events(self, controls: ControlSurface) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Forwards mouse clicks to the ControlSurface.
#
#   - draw(self, simulation: Simulation) -> None:
#     - Side Effects: Renders every particle and the container border.

# Pygame mouse button numbers mapped to simulator input events.
# Anything else (middle button, extra buttons) falls through to OTHER.
# Buttons 4 and 5 are wheel scrolling, not clicks, and map to nothing.
WHEEL_BUTTONS = (4, 5)
MOUSE_BUTTON_EVENTS = {
    1: InputEvent.PRIMARY,
    3: InputEvent.SECONDARY,
}


def input_event_for_button(button: int) -> Optional[InputEvent]:
    if button in WHEEL_BUTTONS:
        return None
    return MOUSE_BUTTON_EVENTS.get(button, InputEvent.OTHER)


def draw_particle(surface: pygame.Surface, particle: Particle):
    """Draws one particle as a filled circle. The physics never sees pygame."""
    center = (int(round(particle.x)), int(round(particle.y)))
    pygame.draw.circle(surface, particle.color, center, int(round(particle.radius)))


class Visualizer:
    """
    Renders the particle population and turns mouse clicks into commands.
    """
    def __init__(self, width: int, height: int, vis_params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()

        self.width = width
        self.height = height
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(vis_params.get('window_title', WINDOW_TITLE))
        self.clock = pygame.time.Clock()

        self.background_color = self._parse_color(
            vis_params.get('background_color'), BACKGROUND_COLOR, 'background_color'
        )
        self.border_color = self._parse_color(
            vis_params.get('border_color'), BORDER_COLOR, 'border_color'
        )
        self.border_width = int(vis_params.get('border_width', BORDER_WIDTH))

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def _parse_color(self, value, default: Tuple[int, int, int], name: str) -> pygame.Color:
        """Reads an RGB list from config, falling back to the default color."""
        if not value:
            return pygame.Color(default)
        try:
            return pygame.Color(*value)
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse {name} {value!r} from config: {e}. Using default.")
            return pygame.Color(default)

    def handle_events(self, controls: ControlSurface) -> bool:
        """
        Processes pending Pygame events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

            if event.type == pygame.MOUSEBUTTONDOWN:
                input_event = input_event_for_button(event.button)
                if input_event is not None:
                    controls.handle(input_event)
        return True

    def draw(self, simulation: Simulation):
        """Draws all particles and the container border."""
        self.screen.fill(self.background_color)
        for particle in simulation.particles:
            draw_particle(self.screen, particle)
        if self.border_width > 0:
            pygame.draw.rect(
                self.screen, self.border_color,
                pygame.Rect(0, 0, self.width, self.height), self.border_width
            )
        pygame.display.flip()

    def wait_for_next_tick(self, tick_interval_ms: float) -> int:
        """Sleeps until the next tick is due. Returns elapsed milliseconds."""
        return self.clock.tick(1000.0 / tick_interval_ms)

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
