"""Streamlit UI for the job board."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobboard.auth import (
    LOGIN_PATH,
    Deny,
    RedirectToLogin,
    authorize_path,
    can_view_applicants,
    match_route,
    nav_items,
)
from jobboard.config import DATA_DIR, ensure_dirs
from jobboard.controllers import (
    ApplicationsController,
    EmployerDashboardController,
    JobDetailController,
    JobListController,
    PostJobController,
)
from jobboard.errors import AuthError
from jobboard.forms import ApplicationForm, JobPostingForm
from jobboard.log import get_logger
from jobboard.markup import job_meta_html, tags_html
from jobboard.models import ApplicationStatus, JobPosting, Role
from jobboard.search import FieldKind, SearchInputCollector
from jobboard.services import Services, build_services

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

UPLOAD_DIR = DATA_DIR / "uploads"
HOME_LATEST = 6

_CSS = """
<style>
.job-meta { color: #555; font-size: 0.9rem; }
.job-tag {
    display: inline-block; padding: 0.1rem 0.55rem; margin-right: 0.35rem;
    border-radius: 10px; background: rgba(74,144,217,0.12); font-size: 0.8rem;
}
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


def _services() -> Services:
    if "services" not in st.session_state:
        ensure_dirs()
        st.session_state["services"] = build_services()
    return st.session_state["services"]


def _go(path: str) -> None:
    """Switch to the page serving ``path`` (falls back to Home)."""
    route = match_route(path) or "/"
    st.switch_page(PAGES.get(route, PAGES["/"]))


def _gate(path: str) -> bool:
    """Apply the route's role requirement. Denials keep the nav on screen."""
    decision = authorize_path(_services().sessions.current, path)
    if isinstance(decision, RedirectToLogin):
        st.session_state["next_path"] = decision.next_path
        st.switch_page(PAGES[decision.login_path])
    if isinstance(decision, Deny):
        st.error(decision.reason)
        return False
    return True


def _open_job(job_id: str) -> None:
    st.session_state["job_id"] = job_id
    st.switch_page(PAGES["/jobs/{id}"])


def _open_applications(job_id: str) -> None:
    st.session_state["applications_job_id"] = job_id
    st.switch_page(PAGES["/jobs/{id}/applications"])


def _job_list(key: str) -> JobListController:
    if key not in st.session_state:
        svc = _services()
        ctrl = JobListController(svc.client, cities=svc.settings["cities"])
        ctrl.load()
        st.session_state[key] = ctrl
    return st.session_state[key]


def _job_card(job: JobPosting, key: str) -> None:
    with st.container(border=True):
        c1, c2 = st.columns([5, 1])
        with c1:
            st.markdown(f"**{job.title or 'Untitled role'}**  \n{job.company_name}")
            meta = job_meta_html(job)
            if meta:
                st.markdown(meta, unsafe_allow_html=True)
            tags = job.employment_type + job.work_mode
            if tags:
                st.markdown(tags_html(tags), unsafe_allow_html=True)
        with c2:
            if st.button("View", key=f"{key}_view_{job.id}", use_container_width=True):
                _open_job(job.id)


# ── Search input ─────────────────────────────────────────────────────────


def _commit_keyword(collector: SearchInputCollector, key: str) -> None:
    collector.commit_keyword(st.session_state.get(key, ""))
    st.session_state[key] = ""


def _commit_location(collector: SearchInputCollector, key: str) -> None:
    collector.commit_location(st.session_state.get(key, ""))
    st.session_state[key] = ""


def _pick_city(collector: SearchInputCollector, key: str) -> None:
    city = st.session_state.get(key)
    if city:
        collector.select_suggestion(city)
    st.session_state[key] = None


def _search_box(ctrl: JobListController, prefix: str) -> None:
    collector = ctrl.collector
    c1, c2, c3 = st.columns([3, 2, 2])
    with c1:
        st.text_input(
            "Keywords",
            key=f"{prefix}_kw",
            placeholder="Job title, skill or company (Enter to add)",
            on_change=_commit_keyword,
            args=(collector, f"{prefix}_kw"),
        )
    with c2:
        st.text_input(
            "Location",
            key=f"{prefix}_loc",
            placeholder="Any city (Enter to add)",
            on_change=_commit_location,
            args=(collector, f"{prefix}_loc"),
        )
    with c3:
        st.selectbox(
            "Popular cities",
            collector.suggestions,
            index=None,
            key=f"{prefix}_city",
            placeholder="Choose a city",
            on_change=_pick_city,
            args=(collector, f"{prefix}_city"),
        )

    tokens = [(FieldKind.KEYWORD, v) for v in collector.keywords]
    tokens += [(FieldKind.LOCATION, v) for v in collector.locations]
    if tokens:
        cols = st.columns(min(len(tokens), 6))
        for i, (kind, value) in enumerate(tokens):
            icon = "🔎" if kind is FieldKind.KEYWORD else "📍"
            cols[i % len(cols)].button(
                f"{icon} {value} ✕",
                key=f"{prefix}_rm_{kind.value}_{value}",
                on_click=collector.remove,
                args=(value, kind),
            )

    b1, b2, _ = st.columns([1, 1, 4])
    if b1.button("Search", key=f"{prefix}_search", type="primary", use_container_width=True):
        collector.search()
    if b2.button("Clear", key=f"{prefix}_clear", use_container_width=True):
        collector.clear()


def _error_panel(ctrl: JobListController, prefix: str) -> bool:
    if not ctrl.error:
        return False
    st.error(ctrl.error)
    if st.button("Retry", key=f"{prefix}_retry"):
        ctrl.retry()
        st.rerun()
    return True


# ── Page: Home ───────────────────────────────────────────────────────────


def page_home() -> None:
    st.header("Find your next job")
    ctrl = _job_list("home_jobs")
    _search_box(ctrl, "home")
    st.divider()

    if _error_panel(ctrl, "home"):
        return

    if ctrl.is_filtered:
        st.subheader("Search results")
        st.caption(ctrl.summary())
        jobs = ctrl.results
    else:
        st.subheader("Latest jobs")
        jobs = ctrl.jobs[:HOME_LATEST]

    if not jobs:
        st.info("No jobs found.")
    for job in jobs:
        _job_card(job, "home")

    if not ctrl.is_filtered and len(ctrl.jobs) > HOME_LATEST:
        if st.button("Browse all jobs"):
            _go("/find-jobs")


# ── Page: Find Jobs ──────────────────────────────────────────────────────


def page_find_jobs() -> None:
    st.header("Find Jobs")
    ctrl = _job_list("find_jobs")
    _search_box(ctrl, "find")

    job_types = _services().settings["job_types"]
    st.markdown("**Job type**")
    cols = st.columns(len(job_types))
    for col, job_type in zip(cols, job_types):
        col.checkbox(
            job_type,
            value=job_type in ctrl.selected_types,
            key=f"find_type_{job_type}",
            on_change=ctrl.toggle_type,
            args=(job_type,),
        )

    st.divider()
    if _error_panel(ctrl, "find"):
        return

    c1, c2 = st.columns([4, 1])
    c1.caption(ctrl.summary())
    if c2.button("Refresh", use_container_width=True):
        ctrl.load()
        st.rerun()

    if not ctrl.results:
        st.info("No jobs match your search. Try fewer filters.")
    for job in ctrl.results:
        _job_card(job, "find")


# ── Page: Job Detail ─────────────────────────────────────────────────────


def _save_upload(uploaded) -> Path:
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    dest = UPLOAD_DIR / Path(uploaded.name).name
    dest.write_bytes(uploaded.getvalue())
    return dest


def page_job_detail() -> None:
    job_id = st.query_params.get("id") or st.session_state.get("job_id")
    if not job_id:
        st.warning("No job selected.")
        if st.button("Find Jobs"):
            _go("/find-jobs")
        return
    if not _gate(f"/jobs/{job_id}"):
        return

    key = f"job_{job_id}"
    if key not in st.session_state:
        detail = JobDetailController(_services().client, job_id)
        detail.load()
        st.session_state[key] = detail
    ctrl: JobDetailController = st.session_state[key]

    if ctrl.error:
        st.error(ctrl.error)
        if st.button("Retry"):
            ctrl.load()
            st.rerun()
        return

    job = ctrl.job
    st.header(job.title)
    if job.company_url:
        st.markdown(f"[{job.company_name}]({job.company_url})")
    else:
        st.markdown(f"**{job.company_name}**")
    if job.company_logo:
        st.image(job.company_logo, width=96)

    c1, c2, c3 = st.columns(3)
    c1.metric("Location", ", ".join(job.locations) or "—")
    c2.metric("Salary", job.salary_range.label() if job.salary_range else "—")
    c3.metric("Experience", f"{job.experience_range.label()} yrs" if job.experience_range else "—")
    tags = job.employment_type + job.work_mode
    if tags:
        st.markdown(tags_html(tags), unsafe_allow_html=True)

    st.subheader("Description")
    st.write(job.description or "No description provided.")
    if job.responsibilities:
        st.subheader("Roles & Responsibilities")
        st.write(job.responsibilities)

    session = _services().sessions.current
    if can_view_applicants(session):
        if st.button("View applicants"):
            _open_applications(job.id)

    st.divider()
    st.subheader("Apply for this job")
    if ctrl.applied:
        st.success("Application submitted successfully!")

    with st.form(f"apply_{job_id}", clear_on_submit=False):
        email = st.text_input("Email", value=session.email if session else "")
        linkedin = st.text_input("LinkedIn profile URL *", placeholder="linkedin.com/in/you")
        resume = st.file_uploader("Resume (PDF or Word) *", type=["pdf", "doc", "docx"])
        submitted = st.form_submit_button("Submit Application", type="primary", use_container_width=True)

    if submitted:
        form = ApplicationForm(
            email=email,
            linkedin_url=linkedin,
            resume_path=_save_upload(resume) if resume else None,
        )
        with st.spinner("Submitting…"):
            ok = ctrl.apply(form)
        if ok:
            st.rerun()
        for err in ctrl.apply_errors:
            st.error(err)


# ── Page: Login / Register ───────────────────────────────────────────────


def page_login() -> None:
    st.header("Login / Signup")
    sessions = _services().sessions

    if sessions.is_authenticated:
        st.info(f"Logged in as **{sessions.current.email}**.")
        return

    tab_login, tab_register = st.tabs(["Login", "Register"])

    with tab_login:
        with st.form("login"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login", type="primary", use_container_width=True)
        if submitted:
            try:
                sessions.login({"email": email, "password": password})
            except AuthError as exc:
                st.error(exc.message)
            else:
                _go(st.session_state.pop("next_path", "/"))

    with tab_register:
        role = st.radio(
            "I am a",
            [Role.JOBSEEKER.value, Role.EMPLOYER.value],
            format_func=lambda r: "Job seeker" if r == Role.JOBSEEKER.value else "Employer",
            horizontal=True,
        )
        with st.form("register"):
            reg_email = st.text_input("Email", key="reg_email")
            reg_password = st.text_input("Password", type="password", key="reg_password")
            company = ""
            if role == Role.EMPLOYER.value:
                company = st.text_input("Company name *")
            registered = st.form_submit_button("Register", use_container_width=True)
        if registered:
            try:
                sessions.register(reg_email, reg_password, role, company)
            except AuthError as exc:
                st.error(exc.message)
            else:
                st.success("Registration successful! Please log in.")


# ── Page: Post Job ───────────────────────────────────────────────────────


def page_post_job() -> None:
    st.header("Post a Job")
    if not _gate("/post-job"):
        return

    svc = _services()
    if "post_job" not in st.session_state:
        st.session_state["post_job"] = PostJobController(svc.client)
    ctrl: PostJobController = st.session_state["post_job"]

    if st.session_state.pop("job_posted", False):
        st.success("Job posted successfully!")

    if ctrl.preview is not None:
        _post_job_preview(ctrl)
        return

    f = ctrl.form
    settings = svc.settings
    with st.form("post_job"):
        title = st.text_input("Job title *", value=f.title)
        company = st.text_input(
            "Company name",
            value=f.company_name or (svc.sessions.current.company_name or ""),
        )
        c1, c2 = st.columns(2)
        with c1:
            employment = st.multiselect("Employment type *", settings["post_job_types"], default=f.employment_type)
            min_sal = st.text_input("Minimum salary", value=str(f.min_salary))
            min_exp = st.text_input("Minimum experience (years)", value=str(f.min_experience))
            logo = st.text_input("Company logo URL", value=f.company_logo)
        with c2:
            work_mode = st.multiselect("Work mode *", settings["work_modes"], default=f.work_mode)
            max_sal = st.text_input("Maximum salary", value=str(f.max_salary))
            max_exp = st.text_input("Maximum experience (years)", value=str(f.max_experience))
            url = st.text_input("Company website", value=f.company_url)
        locations = st.multiselect(
            "Locations",
            sorted(set(settings["cities"]) | set(f.locations)),
            default=f.locations,
            accept_new_options=True,
        )
        description = st.text_area("Description", value=f.description, height=160)
        responsibilities = st.text_area("Roles & responsibilities", value=f.responsibilities, height=120)
        submitted = st.form_submit_button("Preview", type="primary", use_container_width=True)

    if submitted:
        form = JobPostingForm(
            title=title,
            employment_type=employment,
            work_mode=work_mode,
            min_salary=min_sal,
            max_salary=max_sal,
            description=description,
            responsibilities=responsibilities,
            min_experience=min_exp,
            max_experience=max_exp,
            company_name=company,
            locations=locations,
            company_logo=logo,
            company_url=url,
        )
        if ctrl.submit(form):
            st.rerun()
        for err in ctrl.errors:
            st.error(err)


def _post_job_preview(ctrl: PostJobController) -> None:
    p = ctrl.preview
    st.subheader("Preview")
    with st.container(border=True):
        st.markdown(f"### {p['jobTitle']}\n**{p['companyName']}**")
        st.markdown(tags_html(p["employmentType"] + p["workMode"]), unsafe_allow_html=True)
        st.write(f"Locations: {', '.join(p['jobLocation']) or '—'}")
        st.write(f"Salary: {p['minPrice']} - {p['maxPrice']}")
        st.write(f"Experience: {p['experience']['min']} - {p['experience']['max']} yrs")
        st.write(p["description"])
        if p["rolesAndResponsibilities"]:
            st.markdown("**Roles & responsibilities**")
            st.write(p["rolesAndResponsibilities"])

    c1, c2 = st.columns(2)
    if c1.button("Edit", use_container_width=True):
        ctrl.edit()
        st.rerun()
    if c2.button("Post Job", type="primary", use_container_width=True):
        if ctrl.post():
            st.session_state["job_posted"] = True
            st.session_state.pop("dashboard", None)
            st.rerun()
        for err in ctrl.errors:
            st.error(err)


# ── Page: Dashboard ──────────────────────────────────────────────────────


def page_dashboard() -> None:
    st.header("Employer Dashboard")
    if not _gate("/dashboard"):
        return

    svc = _services()
    if "dashboard" not in st.session_state:
        dash = EmployerDashboardController(svc.client, svc.sessions)
        dash.load()
        st.session_state["dashboard"] = dash
    ctrl: EmployerDashboardController = st.session_state["dashboard"]

    if ctrl.needs_login:
        st.session_state.pop("dashboard", None)
        st.session_state["next_path"] = "/dashboard"
        _go(LOGIN_PATH)

    if ctrl.error:
        st.error(ctrl.error)

    c1, c2 = st.columns([4, 1])
    c1.metric("Your job postings", len(ctrl.jobs))
    if c2.button("Refresh", use_container_width=True):
        ctrl.load()
        st.rerun()

    if not ctrl.jobs:
        st.info("You have not posted any jobs yet.")
        if st.button("Post a Job", type="primary"):
            _go("/post-job")
        return

    for job in ctrl.jobs:
        with st.container(border=True):
            c1, c2, c3 = st.columns([4, 1, 1])
            posted = job.posted_at.strftime("%d %b %Y") if job.posted_at else "—"
            c1.markdown(f"**{job.title}**  \n{', '.join(job.locations) or '—'} · {posted} · {job.status}")
            if c2.button("Applicants", key=f"apps_{job.id}", use_container_width=True):
                _open_applications(job.id)
            if c3.button("Delete", key=f"del_{job.id}", use_container_width=True):
                ctrl.delete(job.id)
                st.rerun()


# ── Page: Applications ───────────────────────────────────────────────────


def page_applications() -> None:
    st.header("Applicants")
    job_id = st.query_params.get("job") or st.session_state.get("applications_job_id")
    if not job_id:
        st.warning("No job selected.")
        return
    if not _gate(f"/jobs/{job_id}/applications"):
        return

    key = f"applications_{job_id}"
    if key not in st.session_state:
        apps = ApplicationsController(_services().client, job_id)
        apps.load()
        st.session_state[key] = apps
    ctrl: ApplicationsController = st.session_state[key]

    if ctrl.error:
        st.error(ctrl.error)
        if st.button("Retry"):
            ctrl.load()
            st.rerun()

    if not ctrl.applications:
        st.info("No applications yet.")
        return

    df = pd.DataFrame(
        [
            {
                "Email": a.applicant_email,
                "LinkedIn": a.linkedin_url,
                "Status": a.status.value,
                "Applied": a.submitted_at.strftime("%Y-%m-%d %H:%M") if a.submitted_at else "",
            }
            for a in ctrl.applications
        ]
    )
    st.dataframe(df, use_container_width=True, hide_index=True)

    statuses = [s.value for s in ApplicationStatus]
    for app in ctrl.applications:
        with st.expander(f"{app.applicant_email} · {app.status.value}"):
            if app.linkedin_url:
                st.markdown(f"[LinkedIn profile]({app.linkedin_url})")
            if app.resume_filename:
                st.markdown(f"[View resume]({ctrl.resume_url(app)})")
                dl_key = f"resume_{app.id}"
                if dl_key in st.session_state:
                    st.download_button(
                        "Save resume",
                        st.session_state[dl_key],
                        file_name=ctrl.download_name(app),
                        key=f"save_{app.id}",
                    )
                elif st.button("Download resume", key=f"dl_{app.id}"):
                    data = ctrl.download_resume(app)
                    if data is not None:
                        st.session_state[dl_key] = data
                    st.rerun()

            new_status = st.selectbox(
                "Status",
                statuses,
                index=statuses.index(app.status.value),
                key=f"status_{app.id}",
            )
            if new_status != app.status.value and st.button("Update status", key=f"upd_{app.id}"):
                ctrl.update_status(app.id, new_status)
                st.rerun()


# ── Main ─────────────────────────────────────────────────────────────────


def _inject_css() -> None:
    st.markdown(_CSS, unsafe_allow_html=True)


def _logout() -> None:
    _services().sessions.logout()
    for key in [k for k in st.session_state if k.startswith(("dashboard", "post_job", "applications_"))]:
        del st.session_state[key]


def _sidebar() -> None:
    session = _services().sessions.current
    with st.sidebar:
        st.markdown("### Job Board")
        for item in nav_items(session):
            if item.path == "/logout":
                continue
            st.page_link(PAGES[item.path], label=item.label)

        if session:
            st.divider()
            st.caption(f"Signed in as **{session.email}**")
            if st.button("Logout", use_container_width=True):
                _logout()
                _go("/")


def _chrome() -> None:
    _inject_css()
    _sidebar()


def _wrap_home():
    _chrome()
    page_home()


def _wrap_find_jobs():
    _chrome()
    page_find_jobs()


def _wrap_job_detail():
    _chrome()
    page_job_detail()


def _wrap_login():
    _chrome()
    page_login()


def _wrap_post_job():
    _chrome()
    page_post_job()


def _wrap_dashboard():
    _chrome()
    page_dashboard()


def _wrap_applications():
    _chrome()
    page_applications()


# Keyed by route pattern so auth decisions map straight onto pages.
PAGES = {
    "/": st.Page(_wrap_home, title="Home", icon="🏠", url_path="home", default=True),
    "/find-jobs": st.Page(_wrap_find_jobs, title="Find Jobs", icon="🔎", url_path="find-jobs"),
    "/jobs/{id}": st.Page(_wrap_job_detail, title="Job", icon="💼", url_path="job"),
    LOGIN_PATH: st.Page(_wrap_login, title="Login", icon="🔑", url_path="login"),
    "/post-job": st.Page(_wrap_post_job, title="Post a Job", icon="📝", url_path="post-job"),
    "/dashboard": st.Page(_wrap_dashboard, title="Dashboard", icon="📊", url_path="dashboard"),
    "/jobs/{id}/applications": st.Page(
        _wrap_applications, title="Applicants", icon="👥", url_path="applications"
    ),
}

nav = st.navigation(list(PAGES.values()), position="hidden")
nav.run()
