"""
Streamlit UI for CineScope.
Loads the static movie CSV once, then renders the bubble explorer, the trend chart
and the genre treemap from the cinescope pipeline. All statistics and layout come
from the pipeline; this file only draws them.

Run UI:                streamlit run streamlit_app.py
"""

# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Plotly draws the bubbles, bars and treemap rectangles
import plotly.graph_objects as go  # low-level figure API

# Pipeline entry points and helpers
from cinescope.aggregation import bucket_year_range, toggle_range  # trend drill-down
from cinescope.data_loader import DataLoader  # dataset facets
from cinescope.layout import Bounds, LayoutController, node_ids  # bubble positions
from cinescope.models import DisplayMode, FilterSpec, Granularity  # view state types
from cinescope.palette import ALL_GENRES, genre_color, rating_color, search_genres  # colours/picker
from cinescope.pipeline import (
	DEFAULT_RESULT_COUNT,
	DashboardState,
	aggregate_by_genre,
	aggregate_by_time,
	describe_movie,
	filter_movies,
	load_movies,
)
from cinescope.treemap import squarify  # treemap tiles

# Canvas sizes used for the layouts (plotly scales them to the container)
BUBBLE_BOUNDS = Bounds(900, 600)
TREEMAP_SIZE = (520, 320)
FRAME_TICKS = 30  # simulation ticks between redraws

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="CineScope", layout="wide")  # wide layout

# Main page title
st.title("🎬 CineScope – Movie Explorer")  # friendly header


# Cache the dataset so it is only read once per session
@st.cache_resource(show_spinner=True)
def init_movies():
	"""Load movies; an empty list means the load failed and the UI shows empty states."""
	return load_movies()


def bubble_figure(nodes):
	"""Scatter of layout nodes: marker diameter from the radius, colour from the genres."""
	fig = go.Figure()
	fig.add_trace(go.Scatter(
		x=[n.x for n in nodes],
		y=[n.y for n in nodes],
		mode="markers",
		marker=dict(
			size=[2 * n.radius for n in nodes],
			sizemode="diameter",
			color=[genre_color(n.movie.genres) for n in nodes],
		),
		text=[
			f"<b>{n.movie.title}</b><br>Rating: {n.movie.rating if n.movie.rating is not None else 'N/A'}"
			f"<br>Year: {n.movie.year or ''}<br>Genre: {', '.join(n.movie.genres)}"
			for n in nodes
		],
		hoverinfo="text",
	))
	fig.update_xaxes(visible=False, range=[0, BUBBLE_BOUNDS.width])
	fig.update_yaxes(visible=False, range=[BUBBLE_BOUNDS.height, 0], scaleanchor="x")
	fig.update_layout(height=BUBBLE_BOUNDS.height, margin=dict(l=0, r=0, t=0, b=0), showlegend=False)
	return fig


movies = init_movies()
loader = DataLoader()
year_min, year_max = loader.year_domain(movies)

# Per-session owners of view state and the running layout
if 'dashboard' not in st.session_state:
	st.session_state.dashboard = DashboardState(movies)
if 'layout' not in st.session_state:
	st.session_state.layout = LayoutController(warm_start=True)
if 'trend_range' not in st.session_state:
	st.session_state.trend_range = None
dashboard: DashboardState = st.session_state.dashboard
controller: LayoutController = st.session_state.layout

# Sidebar contains the filters
with st.sidebar:
	st.header("Filters")  # section label
	refresh = st.button("Refresh", type="primary")  # new random sample
	mode_label = st.radio("Mode", ["Random", "Top"], horizontal=True)  # count comes from "Result count"
	mode = DisplayMode.RANDOM if mode_label.startswith("Random") else DisplayMode.TOP
	years = st.slider("Year range", min_value=year_min, max_value=max(year_max, year_min + 1), value=(year_min, year_max))
	search = st.text_input("Search title")
	genre_query = st.text_input("Find genre")
	# Offer the dataset's own tokens so every option can match the filter
	offered = search_genres(genre_query, loader.get_all_genre_tokens(movies) or ALL_GENRES)  # substring, then fuzzy
	genres = st.multiselect("Genres", offered)
	result_count = st.number_input("Result count", min_value=1, max_value=300, value=DEFAULT_RESULT_COUNT)

spec = FilterSpec(
	selected_genres=genres,
	year_range=tuple(years),
	search_text=search,
	result_count=int(result_count),
).clamped((year_min, year_max))
dashboard.update(spec=spec, mode=mode)
visible = dashboard.refresh() if refresh else dashboard.display_list()

tab_bubbles, tab_trends = st.tabs(["Recommendations", "Trends"])

with tab_bubbles:
	if not movies:
		st.error("No movie data could be loaded.")
	elif not visible:
		st.info("No movies match the current filters. Try widening the year range or genres.")
	else:
		# Restart the layout only when the displayed movies changed
		ids = node_ids(visible)
		if controller.simulation is None or [n.id for n in controller.simulation.nodes] != ids:
			controller.start(visible, BUBBLE_BOUNDS)
		frame = st.empty()  # redrawn as the simulation advances
		while True:
			controller.advance(FRAME_TICKS)
			nodes = controller.simulation.snapshot()
			frame.plotly_chart(bubble_figure(nodes), use_container_width=True)
			if controller.simulation.done:
				break

		# Detail panel replaces the modal; ids stay unique when titles repeat or are empty
		by_id = {n.id: n for n in nodes}
		picked = st.selectbox("Movie details", ["(none)"] + list(by_id))
		if picked != "(none)":
			info = describe_movie(by_id[picked].movie)
			st.subheader(f"{info['title']} ({info['year']})")
			st.caption(f"Rating: {info['rating']} | {info['duration']} | {info['genres']}")
			st.write(info['description'])
			st.write(f"Directors: {info['directors']}")
			st.write(f"Writers: {info['writers']}")
			st.write(f"Stars: {info['stars']}")
			if info['link']:
				st.markdown(f"[Open on IMDb]({info['link']})")

with tab_trends:
	granularity = Granularity(st.radio("Group by", ["decade", "year"], horizontal=True))
	# Trends use the whole filtered subset (search included), not just the visible sample
	filtered = filter_movies(movies, spec)
	buckets = aggregate_by_time(filtered, granularity)
	if not buckets:
		st.info("No movies match the current filters. Try adjusting the year range, genres or search.")
		st.session_state.trend_range = None
	else:
		fig = go.Figure()
		fig.add_trace(go.Bar(x=[b.label for b in buckets], y=[b.count for b in buckets], name="Movie count"))
		fig.add_trace(go.Scatter(
			x=[b.label for b in buckets],
			y=[b.average_rating for b in buckets],
			name="Avg rating",
			yaxis="y2",
			mode="lines+markers",
			connectgaps=False,
		))
		fig.update_layout(
			yaxis=dict(title="Movies"),
			yaxis2=dict(title="Avg rating", overlaying="y", side="right", range=[0, 10]),
			height=420,
		)
		st.plotly_chart(fig, use_container_width=True)

		labels = [b.label for b in buckets]
		col1, col2 = st.columns([3, 1])  # bucket picker + toggle button
		with col1:
			clicked = st.selectbox("Bucket", labels)
		with col2:
			if st.button("Focus / unfocus"):
				chosen = bucket_year_range(buckets[labels.index(clicked)], granularity)
				# Same bucket twice clears the focus
				st.session_state.trend_range = toggle_range(st.session_state.trend_range, chosen)

	selected_range = st.session_state.trend_range
	genre_buckets = aggregate_by_genre(filtered, year_range=selected_range)
	title = (
		f"Popular genres ({selected_range[0]}–{selected_range[1]})" if selected_range
		else "Popular genres (current filters)"
	)
	st.subheader(title)
	st.caption("Area shows how many movies each genre has; color reflects average rating.")
	tiles = squarify(genre_buckets, *TREEMAP_SIZE, padding=3)
	if not tiles:
		st.info("No genre data for this time range.")
	else:
		fig = go.Figure()
		for tile in tiles:
			b = tile.bucket
			avg = f"{b.average_rating:.2f}" if b.average_rating is not None else "N/A"
			fig.add_shape(
				type="rect", x0=tile.x0, y0=tile.y0, x1=tile.x1, y1=tile.y1,
				fillcolor=rating_color(b.average_rating), line=dict(color="#C7F7E7", width=1),
			)
			fig.add_trace(go.Scatter(
				x=[(tile.x0 + tile.x1) / 2], y=[(tile.y0 + tile.y1) / 2],
				mode="text" if tile.width > 60 and tile.height > 30 else "none",
				text=[f"{b.label[:12]}<br>{b.count} movie{'s' if b.count != 1 else ''}"],
				hovertext=[f"{b.label}<br>Movies: {b.count}<br>Avg rating: {avg}"],
				hoverinfo="text", textfont=dict(color="#ffffff"),
			))
		fig.update_xaxes(visible=False, range=[0, TREEMAP_SIZE[0]])
		fig.update_yaxes(visible=False, range=[TREEMAP_SIZE[1], 0])
		fig.update_layout(height=TREEMAP_SIZE[1] + 40, showlegend=False, margin=dict(l=0, r=0, t=0, b=0))
		st.plotly_chart(fig, use_container_width=True)

# Footer with dataset size
st.sidebar.markdown("---")  # separator
st.sidebar.caption(f"{len(movies)} movies loaded · {year_min}–{year_max}")
