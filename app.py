# app.py
import streamlit as st

from horarios.config import load_config
from horarios.conflicts import detect_conflicts
from horarios.data_loader import load_courses
from horarios.errors import ScheduleDataError
from horarios.generator import CombinationGenerator
from horarios.model import Selection
from horarios.report import combination_to_dataframe, combinations_summary, conflicts_to_dataframe, weekly_grid
from horarios.scoring import score_breakdown, shift_distribution

# --- CONFIGURACIÓN DE PÁGINA ---
st.set_page_config(page_title="Planificador de Horarios", layout="wide", initial_sidebar_state="expanded")

# --- ESTILOS CSS ---
st.markdown("""
    <style>
    .stButton>button {
        width: 100%;
        background-color: #ff4b4b;
        color: white;
        font-weight: bold;
        height: 45px;
    }
    .section-header {
        font-family: Arial, sans-serif;
        font-weight: bold;
        margin-top: 20px;
        margin-bottom: 10px;
        border-bottom: 2px solid #ff4b4b;
        padding-bottom: 5px;
    }
    </style>
""", unsafe_allow_html=True)


def highlight_conflicts(cell):
    return "background-color: #ffcccc" if isinstance(cell, str) and " / " in cell else ""


def show_selection(selection, cfg):
    courses = list(selection)
    conflicts = detect_conflicts(courses)
    breakdown = score_breakdown(courses, cfg, conflict_count=len(conflicts))

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Créditos", breakdown.credits_total)
    c2.metric("Obligatorios", breakdown.mandatory_count)
    c3.metric("Conflictos", breakdown.conflict_count)
    c4.metric("Puntuación", breakdown.score)

    st.markdown("<div class='section-header'>Horario semanal</div>", unsafe_allow_html=True)
    grid = weekly_grid(courses, cfg.grid_first_hour, cfg.grid_last_hour)
    st.dataframe(grid.style.map(highlight_conflicts), use_container_width=True, height=560)

    if conflicts:
        st.error(f"{len(conflicts)} cruce(s) de horario en la selección")
        st.dataframe(conflicts_to_dataframe(conflicts, courses), use_container_width=True)
    elif courses:
        st.success("Sin cruces de horario")

    turnos = shift_distribution(courses, cfg)
    st.caption(f"Sesiones por turno: Mañana {turnos['M']} · Tarde {turnos['T']} · Noche {turnos['N']}")


def main():
    with st.sidebar:
        st.title("📅 Planificador")
        st.markdown("---")
        data_path = st.text_input("Catálogo de cursos (JSON/CSV)", "data/cursos_ejemplo.json")
        config_path = st.text_input("Configuración", "config.yaml")
        page = st.radio("Ir a la sección:", ["Mi Selección", "Generar Combinaciones"])

    try:
        cfg = load_config(config_path)
        catalog = load_courses(data_path, cfg)
    except (OSError, ScheduleDataError, ValueError) as e:
        st.error(f"No se pudo cargar el catálogo: {e}")
        return

    if catalog.rejected:
        st.sidebar.warning(f"{len(catalog.rejected)} curso(s) descartados por datos inválidos")

    labels = {f"{c.code} - {c.name}": c for c in catalog.courses}

    if page == "Mi Selección":
        st.header("📋 Mi Selección")
        picked = st.multiselect("Cursos", list(labels.keys()))
        selection = Selection()
        for label in picked:
            selection = selection.add(labels[label])
        show_selection(selection, cfg)

    else:
        st.header("🧮 Generar Combinaciones")
        picked = st.multiselect("Pool de candidatos (vacío = todo el catálogo)", list(labels.keys()))
        pool = [labels[label] for label in picked] or list(catalog.courses)
        col1, col2 = st.columns(2)
        max_comb = col1.number_input("Máx. combinaciones", 1, 1000, cfg.max_combinations)
        max_size = col2.number_input("Máx. cursos por combinación", 1, 20, cfg.max_courses_per_combination)

        pool_key = tuple(c.id for c in pool)
        if st.session_state.get("combinations_pool") != pool_key:
            # el lote guardado corresponde a otro pool
            st.session_state.combinations = None

        if st.button("Generar"):
            generator = CombinationGenerator(cfg)
            st.session_state.combinations = generator.generate(pool, int(max_comb), int(max_size))
            st.session_state.combinations_pool = pool_key

        combinations = st.session_state.get("combinations")
        if combinations:
            st.dataframe(combinations_summary(combinations), use_container_width=True, height=300)
            idx = st.number_input("Ver combinación #", 1, len(combinations), 1) - 1
            chosen = combinations[idx]
            st.dataframe(combination_to_dataframe(chosen), use_container_width=True)
            grid = weekly_grid(chosen.courses, cfg.grid_first_hour, cfg.grid_last_hour)
            st.dataframe(grid, use_container_width=True, height=560)
            st.download_button(
                "Descargar resumen CSV",
                combinations_summary(combinations).to_csv(index=False).encode("utf-8"),
                file_name="combinaciones.csv",
            )
        elif combinations is not None:
            st.info("No hay combinaciones para el pool elegido")


main()
