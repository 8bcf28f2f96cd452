# birdfy/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_UP, K_ESCAPE, K_RETURN, K_r, K_t, K_c, K_1, K_2, K_3
from .config import (
    WIDTH, HEIGHT, FPS, FLOOR_H, PLAYFIELD_BOTTOM, BIRD_W, BIRD_H,
    COLOR_FG, COLOR_DANGER, COLOR_BIRD, STORE_PATH_DEFAULT
)
from .difficulty import Difficulty
from .engine import RunState, Snapshot
from .gravity import Theme
from .oracle import Hitbox
from .scores import HistoryPolicy
from .session import Session
from .storage import JsonFileStore

# background, column fill, column border, floor
THEME_COLORS = {
    Theme.NIGHT: ((10, 10, 26), (126, 123, 255), (68, 65, 187), (26, 26, 78)),
    Theme.DAY:   ((91, 184, 245), (116, 191, 46), (74, 138, 24), (93, 138, 60)),
    Theme.LAVA:  ((26, 0, 0), (255, 69, 0), (176, 48, 0), (61, 8, 0)),
}
DIFFICULTY_KEYS = {K_1: Difficulty.EASY, K_2: Difficulty.MEDIUM, K_3: Difficulty.HARD}


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Obstacle seed. Omit for a random one each launch.")
    p.add_argument("--difficulty", choices=[d.value for d in Difficulty], default=None,
                   help="Override the stored difficulty.")
    p.add_argument("--theme", choices=[t.value for t in Theme], default=None,
                   help="Override the stored theme.")
    p.add_argument("--store", type=str, default=STORE_PATH_DEFAULT,
                   help="JSON file holding best score, history and settings.")
    p.add_argument("--history", choices=[h.value for h in HistoryPolicy], default="recent",
                   help="recent: last 6 runs; top: best 10 runs.")
    p.add_argument("--hitbox", choices=[h.value for h in Hitbox], default="rect")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


def draw_world(screen, snap: Snapshot, theme: Theme):
    bg, fill, border, floor = THEME_COLORS[theme]
    screen.fill(bg)
    for o in snap.obstacles:
        top = pygame.Rect(int(o.x), 0, int(o.width), int(o.gap_top))
        bot_y = int(o.gap_top + o.gap_size)
        bot = pygame.Rect(int(o.x), bot_y, int(o.width), max(0, PLAYFIELD_BOTTOM - bot_y))
        for r in (top, bot):
            pygame.draw.rect(screen, fill, r)
            pygame.draw.rect(screen, border, r, width=3)
    pygame.draw.rect(screen, floor, pygame.Rect(0, PLAYFIELD_BOTTOM, WIDTH, FLOOR_H))

    # tilt is cosmetic: draw a rotated copy, physics stays on the upright box
    body = pygame.Surface((BIRD_W, BIRD_H), pygame.SRCALPHA)
    color = COLOR_DANGER if snap.run_state is RunState.CRASHED else COLOR_BIRD
    pygame.draw.ellipse(body, color, body.get_rect())
    pygame.draw.circle(body, (20, 20, 20), (BIRD_W - 12, 10), 3)
    deg = -snap.bird_rotation * 180.0 / 3.141592653589793
    rotated = pygame.transform.rotate(body, deg)
    center = (int(snap.bird_x + BIRD_W / 2), int(snap.bird_y + BIRD_H / 2))
    screen.blit(rotated, rotated.get_rect(center=center))


def blit_center(screen, font, text, y, color=COLOR_FG):
    surf = font.render(text, True, color)
    screen.blit(surf, (WIDTH // 2 - surf.get_width() // 2, y))


def run():
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    session = Session(JsonFileStore(args.store),
                      policy=HistoryPolicy(args.history),
                      seed=args.seed,
                      hitbox=Hitbox(args.hitbox))
    if args.difficulty:
        session.set_difficulty(args.difficulty)
    if args.theme:
        session.set_theme(args.theme)

    pygame.init()
    pygame.display.set_caption("Birdfy")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 18)
    big = pygame.font.SysFont("jetbrainsmono", 48, bold=True)

    snap = session.engine.snapshot()

    while True:
        clock.tick(FPS)
        now = pygame.time.get_ticks()

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                session.flush()
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    session.flush()
                    pygame.quit(); sys.exit()
                if event.key in (K_SPACE, K_UP) and snap.run_state is not RunState.CRASHED:
                    session.request_flap(now)
                if event.key in (K_RETURN, K_r) and snap.run_state is RunState.CRASHED:
                    snap = session.reset()
                if snap.run_state is not RunState.ACTIVE:
                    if event.key in DIFFICULTY_KEYS:
                        session.set_difficulty(DIFFICULTY_KEYS[event.key])
                    if event.key == K_t:
                        themes = list(Theme)
                        session.set_theme(themes[(themes.index(session.theme) + 1) % len(themes)])
                    if event.unicode in ("+", "="):
                        session.step_gravity(+1)
                    if event.unicode in ("-", "_"):
                        session.step_gravity(-1)
                    if event.key == K_c:
                        session.clear_scores()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if snap.run_state is RunState.CRASHED:
                    snap = session.reset()
                else:
                    session.request_flap(now)

        snap = session.update(now)
        session.flush()

        # --- Render ---
        draw_world(screen, snap, session.theme)
        hud = f"Score: {snap.score}   Best: {session.scores.best}   Mode: {snap.difficulty.value.upper()}"
        screen.blit(font.render(hud, True, COLOR_FG), (12, 10))

        if snap.run_state is RunState.MENU:
            blit_center(screen, big, "BIRDFY", HEIGHT // 4)
            blit_center(screen, font, "SPACE / click to flap", HEIGHT // 4 + 70)
            blit_center(screen, font, f"1/2/3 difficulty: {session.difficulty.value}", HEIGHT // 4 + 100)
            blit_center(screen, font,
                        f"T theme: {session.theme.value}   +/- gravity: {session.gravity_multiplier:.1f}x",
                        HEIGHT // 4 + 124)
            blit_center(screen, font, "C clear scores   ESC quit", HEIGHT // 4 + 148)
            for i, entry in enumerate(session.scores.history):
                line = f"#{i + 1}  {entry.score:>4}   {entry.timestamp.replace('T', ' ')}"
                blit_center(screen, font, line, HEIGHT // 2 + 20 + i * 22, (170, 180, 210))
        elif snap.run_state is RunState.CRASHED:
            blit_center(screen, big, str(snap.score), HEIGHT // 3)
            blit_center(screen, font, f"BEST: {session.scores.best}", HEIGHT // 3 + 64)
            if snap.score > 0 and snap.score >= session.scores.best:
                blit_center(screen, font, "NEW BEST!", HEIGHT // 3 + 90, COLOR_BIRD)
            blit_center(screen, font, "ENTER / R / click to retry", HEIGHT // 3 + 120)

        pygame.display.flip()


if __name__ == "__main__":
    run()
