import pygame
from dataclasses import dataclass, field

from predpreyfield.ecology.stats import species_codes


@dataclass
class GuiStyle:
    margin: int = 10
    panel_width: int = 220
    panel_padding: int = 12
    background_color: tuple = (245, 245, 245)
    panel_background: tuple = (235, 235, 235)
    empty_color: tuple = (255, 255, 255)
    text_color: tuple = (20, 20, 20)
    species_colors: dict = field(
        default_factory=lambda: {
            "rabbit": (230, 140, 40),
            "fox": (60, 90, 220),
            "tiger": (220, 60, 60),
        }
    )
    fallback_colors: tuple = ((50, 160, 70), (140, 60, 200), (90, 90, 90))


class PyGameRenderer:
    def __init__(self, depth: int, width: int, species_names, cell_size: int = 6, fps: int = 20):
        self.depth = depth
        self.width = width
        self.cell_size = cell_size
        self.fps = fps
        self.style = GuiStyle()
        self.species_names = list(species_names)
        self.codes = species_codes(self.species_names)
        self.colors = {}
        for idx, name in enumerate(self.species_names):
            fallback = self.style.fallback_colors[idx % len(self.style.fallback_colors)]
            self.colors[name] = self.style.species_colors.get(name, fallback)

        window_width = self.style.margin * 2 + width * cell_size + self.style.panel_width
        window_height = self.style.margin * 2 + max(depth * cell_size, 200) + 24
        pygame.init()
        self.screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption("Predator-Prey Field")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont(None, 20)
        self.small_font = pygame.font.SysFont(None, 16)

        self.history_counts = {name: [] for name in self.species_names}
        self.history_max = 200

    def close(self) -> None:
        pygame.quit()

    def update(self, field, tick: int, counts: dict) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False

        self.screen.fill(self.style.background_color)
        self._draw_cells(field)
        self._draw_text(tick, counts)
        self._draw_panel(tick, counts)

        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def _draw_cells(self, field) -> None:
        grid = field.to_array(self.codes)
        by_code = {code: self.colors[name] for name, code in self.codes.items()}
        background = pygame.Rect(
            self.style.margin, self.style.margin, self.width * self.cell_size, self.depth * self.cell_size
        )
        pygame.draw.rect(self.screen, self.style.empty_color, background)
        for row in range(self.depth):
            for col in range(self.width):
                code = int(grid[row, col])
                if code == 0:
                    continue
                rect = pygame.Rect(
                    self.style.margin + col * self.cell_size,
                    self.style.margin + row * self.cell_size,
                    self.cell_size,
                    self.cell_size,
                )
                pygame.draw.rect(self.screen, by_code[code], rect)

    def _draw_text(self, tick: int, counts: dict) -> None:
        populations = " ".join(f"{name}={counts.get(name, 0)}" for name in self.species_names)
        surface = self.font.render(f"t={tick} {populations}", True, self.style.text_color)
        self.screen.blit(surface, (self.style.margin, self.style.margin + self.depth * self.cell_size + 2))

    def _draw_panel(self, tick: int, counts: dict) -> None:
        panel_x = self.style.margin + self.width * self.cell_size + self.style.margin
        panel_y = self.style.margin
        panel_w = self.style.panel_width - self.style.margin
        panel_h = max(self.depth * self.cell_size, 200)
        rect = pygame.Rect(panel_x, panel_y, panel_w, panel_h)
        pygame.draw.rect(self.screen, self.style.panel_background, rect)

        self._push_history(counts)

        y = panel_y + self.style.panel_padding
        y = self._draw_panel_line(panel_x, y, f"Step: {tick}", bold=True)
        for name in self.species_names:
            y = self._draw_panel_line(panel_x, y, f"{name}: {counts.get(name, 0)}", color=self.colors[name])

        # Sparkline at bottom
        spark_h = 90
        spark_y = panel_y + panel_h - spark_h - self.style.panel_padding
        spark_rect = pygame.Rect(panel_x + self.style.panel_padding, spark_y, panel_w - 2 * self.style.panel_padding, spark_h)
        pygame.draw.rect(self.screen, (225, 225, 225), spark_rect)
        self._draw_sparkline(spark_rect)

    def _push_history(self, counts: dict) -> None:
        for name in self.species_names:
            series = self.history_counts[name]
            series.append(counts.get(name, 0))
            if len(series) > self.history_max:
                series.pop(0)

    def _draw_panel_line(self, x: int, y: int, text: str, bold: bool = False, color=None) -> int:
        font = self.font if bold else self.small_font
        surface = font.render(text, True, color or self.style.text_color)
        self.screen.blit(surface, (x + self.style.panel_padding, y))
        return y + surface.get_height() + 2

    def _draw_sparkline(self, rect: pygame.Rect) -> None:
        n = len(self.history_counts[self.species_names[0]]) if self.species_names else 0
        if n < 2:
            return
        max_count = max(max(max(series) for series in self.history_counts.values()), 1)
        for name, series in self.history_counts.items():
            for i in range(1, n):
                x0 = rect.x + int((i - 1) / (n - 1) * rect.width)
                x1 = rect.x + int(i / (n - 1) * rect.width)
                y0 = rect.y + rect.height - int(series[i - 1] / max_count * rect.height)
                y1 = rect.y + rect.height - int(series[i] / max_count * rect.height)
                pygame.draw.line(self.screen, self.colors[name], (x0, y0), (x1, y1), 2)
