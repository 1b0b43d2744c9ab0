"""The game window: event handling, the frame loop and the command entry point."""

from __future__ import annotations

import math
import os
import sys
from collections.abc import Sequence

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame

from raycube.image import Image
from raycube.parsing import SceneError, load_scene
from raycube.raycast import cast_rays
from raycube.render import GunAnimation, render_frame
from raycube.world import Game, Key

MOUSE_ROT_STEP = 0.05
TITLE = "raycube"
TWO_PI = 2 * math.pi

_SPECIAL_KEYS = {
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_ESCAPE: Key.ESCAPE,
}


def translate_key(key: int) -> int | None:
    """Map a pygame key code to the keysym the game understands, or None."""
    if key in _SPECIAL_KEYS:
        return int(_SPECIAL_KEYS[key])
    if 32 <= key < 127:
        # Printable ASCII codes coincide with their keysyms.
        return key
    return None


def handle_mouse_move(game: Game, x: int, y: int) -> bool:
    """Turn the player by a fixed step toward the side the mouse moved.

    Returns True when the pointer should be put back in the window centre.
    The vertical position is ignored.
    """
    del y
    center_x = game.win_width // 2
    if x == center_x or game.input.c:
        return False
    angle = game.player.angle
    if x > game.prev_mouse_x:
        angle += MOUSE_ROT_STEP
    elif x < game.prev_mouse_x:
        angle -= MOUSE_ROT_STEP
    if angle < 0:
        angle += TWO_PI
    if angle > TWO_PI:
        angle -= TWO_PI
    game.player.angle = angle
    game.prev_mouse_x = center_x
    return True


class App:
    """Drives a game: feeds it events and renders frames onto a pygame surface."""

    def __init__(
        self,
        game: Game,
        gun: GunAnimation | None = None,
        screen: pygame.Surface | None = None,
    ) -> None:
        self.game = game
        self.gun = gun
        self.screen = screen

    @property
    def center(self) -> tuple[int, int]:
        return self.game.win_width // 2, self.game.win_height // 2

    def handle_event(self, event: pygame.event.Event) -> None:
        """Dispatch one pygame event to the game."""
        if event.type == pygame.QUIT:
            self.game.running = False
        elif event.type == pygame.KEYDOWN:
            keysym = translate_key(event.key)
            if keysym is not None:
                self.game.on_keypress(keysym)
        elif event.type == pygame.KEYUP:
            keysym = translate_key(event.key)
            if keysym is not None:
                self.game.on_keyrelease(keysym)
        elif event.type == pygame.MOUSEMOTION:
            x, y = event.pos
            if handle_mouse_move(self.game, x, y) and self.screen is not None:
                pygame.mouse.set_pos(self.center)

    def frame(self) -> Image:
        """Advance one tick, render it, and show it when a screen is attached."""
        self.game.handle_movement()
        slices = cast_rays(self.game)
        image = render_frame(self.game, slices, self.gun)
        if self.screen is not None:
            surface = pygame.image.frombuffer(
                image.to_rgb_bytes(), (image.width, image.height), "RGB"
            )
            self.screen.blit(surface, (0, 0))
            pygame.display.flip()
        return image

    def run(self) -> None:
        """Open the window and loop until the game stops running."""
        pygame.init()
        try:
            self.screen = pygame.display.set_mode(
                (self.game.win_width, self.game.win_height)
            )
            pygame.display.set_caption(TITLE)
            while self.game.running:
                for event in pygame.event.get():
                    self.handle_event(event)
                if not self.game.running:
                    break
                self.frame()
        finally:
            self.screen = None
            pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Load the scene named on the command line and play it."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("ERROR\ninvalid argument", file=sys.stderr)
        return 1
    game = Game()
    try:
        load_scene(game, args[0])
    except SceneError as exc:
        print(f"ERROR\n{exc}", file=sys.stderr)
        return 1
    App(game, GunAnimation()).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())