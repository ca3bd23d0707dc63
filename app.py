"""
Monster Card Generator - Aplikacja Streamlit
- Formularz karty
- Podgląd na żywo
- Pobieranie PNG i reset
"""

import streamlit as st
import logging

from dotenv import load_dotenv

from card_graphics.card_renderer import CardRenderer, RenderSurface
from card_graphics.exporter import export_filename, export_png
from card_graphics.templates import FrameStyle, list_frame_styles, resolve_frame
from card_state.card_input import (
    DEFAULT_RACES,
    DEFAULT_TITLE,
    MAX_CLASSES,
    MAX_TECHNIQUES,
    MIN_CLASSES,
    TECHNIQUES_PER_CLASS
)
from card_state.session import CardSession

# Konfiguracja
load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# === KONFIGURACJA STRONY ===
st.set_page_config(
    page_title="Monster Card Generator",
    page_icon="🃏",
    layout="wide"
)

# === STYLE CSS ===
st.markdown("""
<style>
    .main-header {
        font-size: 2.2rem;
        font-weight: 700;
        background: linear-gradient(90deg, #22D3EE, #A78BFA);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        margin-bottom: 0.5rem;
    }

    .sub-header {
        color: #94A3B8;
        font-size: 1rem;
        margin-bottom: 1.5rem;
    }

    .divider-label {
        font-size: 0.75rem;
        text-transform: uppercase;
        letter-spacing: 0.15em;
        color: #94A3B8;
    }

    .stButton > button {
        width: 100%;
        border-radius: 16px;
        font-weight: 600;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)

ILLUSTRATION_DEFAULT = "Domyślna (szachownica)"
ILLUSTRATION_UPLOAD = "Przesłany plik"

# Wartości widżetów po resecie
WIDGET_DEFAULTS = {
    "card_frame": FrameStyle.NEO.value,
    "card_classes": 1,
    "card_title": "",
    "card_username": "",
    "card_monster": "",
    "card_ex": "",
    "card_meme": "",
    "card_race_preset": DEFAULT_RACES[0],
    "card_race_custom": "",
    "card_illustration_mode": ILLUSTRATION_DEFAULT,
    **{f"card_tech_{i}": "" for i in range(MAX_TECHNIQUES)}
}


# === INICJALIZACJA SESSION STATE ===
def init_session_state():
    """Inicjalizuje stan sesji"""

    if "initialized" not in st.session_state:
        st.session_state.initialized = True

        renderer = CardRenderer()
        surface = RenderSurface(renderer.layout)
        st.session_state.card_renderer = renderer
        st.session_state.card_surface = surface
        session = CardSession(on_render=lambda card: renderer.render(surface, card))
        st.session_state.card_session = session
        st.session_state.upload_key = 0

        for key, value in WIDGET_DEFAULTS.items():
            st.session_state[key] = value
        st.session_state.card_title = DEFAULT_TITLE

        # Pierwszy podgląd; dalej renderuje tylko faktyczna zmiana
        session.render()
        logger.info("Session state initialized")


# === CALLBACKI ===

def set_frame(style: str):
    st.session_state.card_frame = style


def reset_form():
    """Czyści formularz; sesja karty renderuje raz, kolejny przebieg niczego nie zmienia"""
    for key, value in WIDGET_DEFAULTS.items():
        st.session_state[key] = value
    # Nowy klucz = pusty file_uploader
    st.session_state.upload_key += 1
    st.session_state.card_session.reset()
    st.toast("Formularz zresetowany", icon="🧹")


# === KOMPONENTY UI ===

def divider_label(text: str):
    st.markdown(f'<div class="divider-label">{text}</div>', unsafe_allow_html=True)


def render_frame_picker():
    divider_label("Ramka")
    cols = st.columns(4)
    for col, style in zip(cols, list_frame_styles()):
        with col:
            st.button(
                resolve_frame(FrameStyle(style)).name,
                key=f"frame_btn_{style}",
                type="primary" if st.session_state.card_frame == style else "secondary",
                on_click=set_frame,
                args=(style,)
            )


def render_illustration_picker():
    divider_label("Ilustracja")
    mode = st.radio(
        "Ilustracja",
        [ILLUSTRATION_DEFAULT, ILLUSTRATION_UPLOAD],
        key="card_illustration_mode",
        horizontal=True,
        label_visibility="collapsed"
    )
    if mode == ILLUSTRATION_UPLOAD:
        st.file_uploader(
            "Plik obrazu",
            type=["png", "jpg", "jpeg", "webp", "gif", "bmp"],
            key=f"card_upload_{st.session_state.upload_key}"
        )


def render_text_fields():
    c1, c2 = st.columns(2)
    with c1:
        st.text_input("Tytuł (称号)", key="card_title", placeholder=f"np. {DEFAULT_TITLE}")
        st.text_input("Nazwa potwora", key="card_monster", placeholder="Nazwa potwora")
    with c2:
        st.text_input("Nazwa gracza", key="card_username", placeholder="Gracz")
        st.text_input("Technika EX", key="card_ex", placeholder="Nazwa techniki EX")
    st.text_input("Battle Meme", key="card_meme", placeholder="Nazwa Battle Meme")

    c1, c2 = st.columns(2)
    with c1:
        st.selectbox("Rasa (lista)", DEFAULT_RACES, key="card_race_preset")
    with c2:
        st.text_input(
            "Rasa (własna, nadpisuje)",
            key="card_race_custom",
            placeholder="Puste = rasa z listy"
        )


def render_technique_fields(class_count: int):
    # Streamlit usuwa stan ukrytych pól; przywracamy go z sesji karty
    session: CardSession = st.session_state.card_session
    for idx in range(class_count * TECHNIQUES_PER_CLASS):
        key = f"card_tech_{idx}"
        if key not in st.session_state:
            st.session_state[key] = session.techniques[idx]

    divider_label(f"Techniki (6 × {class_count})")
    cols = st.columns(class_count)
    for c, col in enumerate(cols):
        with col:
            st.caption(f"Klasa {c + 1}")
            for r in range(TECHNIQUES_PER_CLASS):
                idx = c * TECHNIQUES_PER_CLASS + r
                st.text_input(
                    f"Technika {r + 1}",
                    key=f"card_tech_{idx}",
                    placeholder=f"Technika {r + 1}",
                    label_visibility="collapsed"
                )


def sync_session():
    """Przenosi wartości widżetów do sesji karty (render tylko przy zmianie)"""
    session: CardSession = st.session_state.card_session
    upload = st.session_state.get(f"card_upload_{st.session_state.upload_key}")

    # Tylko widoczne klasy; techniki ukrytych klas zostają w sesji
    visible = st.session_state.card_classes * TECHNIQUES_PER_CLASS
    techniques = list(session.techniques)
    for i in range(visible):
        techniques[i] = st.session_state.get(f"card_tech_{i}", techniques[i])

    session.update(
        frame_style=st.session_state.card_frame,
        class_count=st.session_state.card_classes,
        title=st.session_state.card_title,
        username=st.session_state.card_username,
        monster_name=st.session_state.card_monster,
        ex_name=st.session_state.card_ex,
        battle_meme_name=st.session_state.card_meme,
        race_preset=st.session_state.card_race_preset,
        race_custom=st.session_state.card_race_custom,
        use_default_illustration=(
            st.session_state.card_illustration_mode == ILLUSTRATION_DEFAULT
        ),
        upload=upload.getvalue() if upload is not None else None,
        techniques=techniques
    )
    session.poll()


def render_preview():
    surface: RenderSurface = st.session_state.card_surface
    session: CardSession = st.session_state.card_session

    st.caption("Podgląd na żywo")
    st.image(surface.image)
    st.caption(f"{surface.width}×{surface.height}px")

    c1, c2 = st.columns(2)
    with c1:
        st.download_button(
            "📥 Pobierz PNG",
            data=export_png(surface),
            file_name=export_filename(session.fields["title"]),
            mime="image/png",
            type="primary"
        )
    with c2:
        st.button("🧹 Reset", key="card_reset", on_click=reset_form)


def main():
    """Główna funkcja aplikacji"""

    init_session_state()

    st.markdown('<h1 class="main-header">Monster Card Generator</h1>', unsafe_allow_html=True)
    st.markdown(
        '<p class="sub-header">Każda zmiana w formularzu od razu odświeża podgląd karty.</p>',
        unsafe_allow_html=True
    )

    col_settings, col_preview = st.columns([1, 1])

    with col_settings:
        render_frame_picker()

        divider_label(f"Liczba klas ({MIN_CLASSES}-{MAX_CLASSES})")
        class_count = st.slider(
            "Liczba klas",
            min_value=MIN_CLASSES,
            max_value=MAX_CLASSES,
            key="card_classes",
            label_visibility="collapsed"
        )
        st.caption(f"Aktualnie: {class_count} klas (pól technik: {class_count * TECHNIQUES_PER_CLASS})")

        render_illustration_picker()
        render_text_fields()
        render_technique_fields(class_count)

    try:
        sync_session()
        if st.session_state.card_illustration_mode == ILLUSTRATION_UPLOAD and (
            st.session_state.card_session.fields["upload"] and
            st.session_state.card_session.illustration is None
        ):
            st.warning("⚠️ Nie udało się odczytać przesłanego obrazu")
    except (ValueError, KeyError) as e:
        logger.error(f"Błąd aktualizacji karty: {e}")
        st.error(f"Błąd: {e}")

    with col_preview:
        render_preview()


if __name__ == "__main__":
    main()
