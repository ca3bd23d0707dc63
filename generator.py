#!/usr/bin/env python3
"""
Monster Card Generator - CLI
Renderuj kartę potwora z linii poleceń.

Użycie:
    python generator.py --title "魔王スミノフ" --monster "Smirnoff"
    python generator.py --frame holo --classes 2 -t "Fireball" -t "Ice Wall"
    python generator.py --illustration art.png --race-custom "Golem"
"""

import os
import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from card_graphics.card_renderer import CardRenderer, RenderSurface
from card_graphics.exporter import save_png
from card_graphics.templates import list_frame_styles, resolve_frame
from card_state.card_input import DEFAULT_RACES, MAX_CLASSES, MIN_CLASSES
from card_state.session import CardSession

# Konfiguracja
load_dotenv()
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Kolory terminala
class Colors:
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    END = '\033[0m'
    BOLD = '\033[1m'


def print_header():
    """Wyświetla header aplikacji"""
    print(f"""
{Colors.CYAN}{Colors.BOLD}
    ╔═══════════════════════════════════════════════════════════╗
    ║                                                           ║
    ║   🃏  MONSTER CARD GENERATOR  v1.0                        ║
    ║                                                           ║
    ╚═══════════════════════════════════════════════════════════╝
{Colors.END}
""")


def print_step(emoji: str, message: str, color: str = Colors.CYAN):
    """Wyświetla krok procesu"""
    print(f"{color}{emoji} {message}{Colors.END}")


def print_success(message: str):
    """Wyświetla sukces"""
    print(f"{Colors.GREEN}✅ {message}{Colors.END}")


def print_error(message: str):
    """Wyświetla błąd"""
    print(f"{Colors.RED}❌ {message}{Colors.END}")


def read_illustration(path: Optional[str]) -> Optional[bytes]:
    """Czyta plik ilustracji (None = szachownica)"""
    if not path:
        return None
    with open(path, "rb") as f:
        return f.read()


def build_session(args: argparse.Namespace) -> CardSession:
    """Wypełnia sesję karty argumentami CLI"""
    session = CardSession()
    session.update(
        frame_style=args.frame,
        class_count=args.classes,
        title=args.title,
        username=args.username,
        monster_name=args.monster,
        ex_name=args.ex,
        battle_meme_name=args.meme,
        race_preset=args.race,
        race_custom=args.race_custom
    )
    if args.technique:
        session.set_techniques(args.technique)

    data = read_illustration(args.illustration)
    if data:
        session.upload_illustration(data)
        if session.illustration is None:
            print_error(f"Nie można odczytać obrazu: {args.illustration}")
    return session


def run_generation(args: argparse.Namespace) -> Path:
    """Renderuje kartę i zapisuje PNG"""
    renderer = CardRenderer()
    surface = RenderSurface(renderer.layout)

    session = build_session(args)
    card = session.snapshot()

    palette = resolve_frame(card.frame_style)
    print_step("🎨", f"Ramka: {palette.name} | Klasy: {card.class_count}")
    print_step("📝", f"Tytuł: {card.title or '-'} | Potwór: {card.monster_name or '-'}")
    if card.race:
        print_step("🏷️", f"Rasa: {card.race}")

    renderer.render(surface, card)
    return save_png(surface, card.title, Path(args.output_dir))


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monster Card Generator - CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Przykłady użycia:
  python generator.py --title "魔王スミノフ" --username player1 --monster Smirnoff
  python generator.py --frame classic --classes 3 -t "Fireball" -t "Ice Wall"
  python generator.py --illustration art.png --output-dir cards
        """
    )

    parser.add_argument(
        "-f", "--frame",
        choices=list_frame_styles(),
        default="neo",
        help="Styl ramki (domyślnie: neo)"
    )

    parser.add_argument(
        "-c", "--classes",
        type=int,
        choices=range(MIN_CLASSES, MAX_CLASSES + 1),
        default=1,
        help="Liczba klas 1-4 (6 technik na klasę)"
    )

    parser.add_argument("--title", default="", help="Tytuł (称号)")
    parser.add_argument("--username", default="", help="Nazwa gracza")
    parser.add_argument("--monster", default="", help="Nazwa potwora")
    parser.add_argument("--ex", default="", help="Nazwa techniki EX")
    parser.add_argument("--meme", default="", help="Nazwa Battle Meme")

    parser.add_argument(
        "--race",
        default=DEFAULT_RACES[0],
        help=f"Rasa z listy ({', '.join(DEFAULT_RACES)})"
    )

    parser.add_argument(
        "--race-custom",
        default="",
        help="Własna rasa (nadpisuje --race)"
    )

    parser.add_argument(
        "-t", "--technique",
        action="append",
        help="Technika (można podać wielokrotnie, kolejno kolumnami)"
    )

    parser.add_argument(
        "-i", "--illustration",
        type=str,
        help="Plik ilustracji (domyślnie szachownica)"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=os.environ.get("CARD_OUTPUT_DIR", "outputs"),
        help="Katalog wyjściowy"
    )

    parser.add_argument(
        "--no-header",
        action="store_true",
        help="Nie pokazuj headera"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Tryb verbose (więcej informacji)"
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Główna funkcja CLI"""
    args = create_parser().parse_args(argv)

    if not args.no_header:
        print_header()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        filepath = run_generation(args)
    except KeyboardInterrupt:
        print(f"\n{Colors.YELLOW}⚠️ Przerwano przez użytkownika{Colors.END}")
        sys.exit(0)
    except (OSError, ValueError) as e:
        print_error(f"Błąd krytyczny: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    print_success(f"Zapisano kartę: {filepath}")


if __name__ == "__main__":
    main()
