"""Pure renderers for every generated project and study file.

Renderers only see names and relative paths. Nothing here may embed the
absolute location of the project on the user's machine.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from research_scaffold.scaffold.types import (
    ANALYSIS_STEM,
    LITERATE_EXT,
    LITERATURE_DIR,
    PROCESSING_STEM,
    RUN_ALL_STEM,
    SCRIPT_EXT,
    STUDIES_DIR,
    WRITEUP_DIR,
    Artifact,
    AuthoringMode,
    ProjectConfig,
    StudyUnit,
)

DEFAULT_PACKAGE_DATE = "2025-01-01"
BIBLIOGRAPHY_PATH = PurePosixPath(LITERATURE_DIR) / "_references.bib"
README_PATH = PurePosixPath("README.md")
REPRODUCIBILITY_HEADING = "## Reproducibility"

# Run-all sources these in order; processing always precedes analysis.
SCRIPT_ORDER: tuple[str, ...] = (PROCESSING_STEM, ANALYSIS_STEM)


def render_project_file() -> str:
    return (
        "Version: 1.0\n"
        "\n"
        "RestoreWorkspace: No\n"
        "SaveWorkspace: No\n"
        "AlwaysSaveHistory: Default\n"
        "\n"
        "EnableCodeIndexing: Yes\n"
        "UseSpacesForTab: Yes\n"
        "NumSpacesForTab: 2\n"
        "Encoding: UTF-8\n"
        "\n"
        "RnwWeave: Sweave\n"
        "LaTeX: pdfLaTeX\n"
        "\n"
        "BuildType: Package\n"
        "PackageUseDevtools: Yes\n"
        "PackageInstallArgs: --no-multiarch --with-keep.source\n"
    )


def render_license() -> str:
    return (
        "Creative Commons Attribution 4.0 International (CC BY 4.0)\n"
        "\n"
        "This work is licensed under the Creative Commons Attribution 4.0\n"
        "International License. You are free to share and adapt the material for\n"
        "any purpose, even commercially, under the terms below:\n"
        "\n"
        "  Attribution: You must give appropriate credit, provide a link to the\n"
        "    license, and indicate if changes were made.\n"
        "\n"
        "No additional restrictions: You may not apply legal terms or technological\n"
        "measures that legally restrict others from doing anything the license permits.\n"
        "\n"
        "Full license text: https://creativecommons.org/licenses/by/4.0/legalcode\n"
    )


def render_bibliography() -> str:
    # Exactly one entry, so citation keys resolve on the first render.
    return (
        "@article{RoggenkampEtAl_2025,\n"
        "  title={DICE: Advancing Social Media Research through Digital In-Context Experiments},\n"
        "  author={Roggenkamp, Hauke and Boegershausen, Johannes and Hildebrand, Christian},\n"
        "  journal={Journal of Marketing},\n"
        "  year={2025},\n"
        "  publisher={SAGE Publications},\n"
        "  doi={10.1177/00222429251371702},\n"
        "  url={https://doi.org/10.1177/00222429251371702},\n"
        "  note={Forthcoming. First published online August 13, 2025}\n"
        "}\n"
    )


def render_data_readme() -> str:
    return (
        "# Data Provenance\n"
        "\n"
        "Explain when, how, and by whom the data was collected.\n"
    )


def render_gitignore(*, ignore_large_outputs: bool = True) -> str:
    large = ""
    if ignore_large_outputs:
        large = (
            "# Large data (use Git LFS or external storage)\n"
            f"{STUDIES_DIR}/*/outputs/fitted_models/\n"
            f"{STUDIES_DIR}/*/outputs/plots/\n"
            "\n"
        )
    return (
        "# History files\n"
        ".Rhistory\n"
        ".Rapp.history\n"
        "\n"
        "# Session Data files\n"
        ".RData\n"
        "\n"
        "# User-specific files\n"
        ".Rproj.user/\n"
        "\n"
        "# Quarto / R Markdown caches\n"
        "_cache/\n"
        "*/_cache/\n"
        "*.knit.md\n"
        "*.utf8.md\n"
        "\n"
        "# Temporary files\n"
        "*.tmp\n"
        "*.log\n"
        "\n" + large + "# OS-specific files\n"
        ".DS_Store\n"
        "Thumbs.db\n"
    )


def render_gitattributes() -> str:
    return (
        "# Auto detect text files and perform LF normalization\n"
        "* text=auto\n"
        "\n"
        "# Prevent GitHub Linguist from detecting generated HTML\n"
        "*.html linguist-detectable=false\n"
    )


def derive_title(relative_path: PurePosixPath | str, *, code_prefix: PurePosixPath | str, ext: str) -> str:
    """Strip the study's code-folder prefix and the extension from a path.

    Both ends are anchored literally, so study names containing regex
    metacharacters or the extension text elsewhere are left alone.
    """
    title = str(relative_path)
    prefix = str(code_prefix).rstrip("/") + "/"
    if title.startswith(prefix):
        title = title[len(prefix) :]
    if ext and title.endswith(ext):
        title = title[: -len(ext)]
    return title


def render_literate_header(title: str, *, package_date: str = DEFAULT_PACKAGE_DATE) -> str:
    return (
        "---\n"
        f'title: "{title}"\n'
        'author: "author"\n'
        "date: today\n"
        "format:\n"
        "  html:\n"
        "    code-fold: true\n"
        "    highlight-style: haddock\n"
        "    theme: flatly\n"
        "    toc: true\n"
        "    toc-location: left\n"
        "    embed-resources: true\n"
        "execute:\n"
        "  warning: false\n"
        "  message: false\n"
        f"bibliography: ../../../{BIBLIOGRAPHY_PATH}\n"
        "---\n"
        "\n"
        "```{r setup}\n"
        "#| include: false\n"
        "options(scipen = 999) # turn off scientific notation globally\n"
        "set.seed(42)\n"
        "```\n"
        "\n"
        "```{r packages_CRAN}\n" + _package_block(package_date) + "```\n"
        "\n"
        "```{r session_info}\n"
        "sessionInfo()\n"
        "```\n"
    )


def _package_block(package_date: str) -> str:
    return (
        "options(repos = c(CRAN = 'https://cloud.r-project.org'))\n"
        "if (!requireNamespace('groundhog', quietly = TRUE)) {\n"
        "  install.packages('groundhog')\n"
        "}\n"
        "pkgs <- c('data.table') # add more packages here\n"
        "groundhog::groundhog.library(pkg = pkgs,\n"
        f"                             date = '{package_date}')\n"
        "rm(pkgs)\n"
    )


def render_script(title: str) -> str:
    return (
        f"# {title}\n"
        "# Author: author\n"
        "\n"
        f"# Consider loading and installing required packages in main file ({RUN_ALL_STEM}{SCRIPT_EXT})\n"
        "\n"
        "# Your code here...\n"
        "\n"
        "# Session info\n"
        "sessionInfo()\n"
    )


def render_run_all(*, package_date: str = DEFAULT_PACKAGE_DATE) -> str:
    sources = "\n".join(f'source("{stem}{SCRIPT_EXT}")\n' for stem in SCRIPT_ORDER)
    return (
        "# Main script to run entire analysis workflow\n"
        "# Setup -----\n"
        "options(scipen = 999) # turn off scientific notation globally\n"
        "set.seed(42)\n"
        "\n"
        "# Load packages -----\n"
        "# Consider loading and installing required packages here:\n"
        + _package_block(package_date)
        + "\n"
        "# Run analysis scripts in order -----\n" + sources
    )


def _file_hint(mode: AuthoringMode) -> str:
    return ".qmd/.Rmd" if mode == "literate" else SCRIPT_EXT


def render_single_study_reproducibility(study: StudyUnit) -> str:
    code = study.layout.code
    data = study.layout.data
    if study.authoring_mode == "literate":
        proc = code / f"{PROCESSING_STEM}{LITERATE_EXT}"
        ana = code / f"{ANALYSIS_STEM}{LITERATE_EXT}"
        return (
            f"- Place raw data in `{data}/raw/`.\n"
            f"- Write processing in `{proc}` and analyses in `{ana}`.\n"
            f"- Re-run data processing with `{proc}`. This will create "
            f"`{PROCESSING_STEM}.html` and files in `data/processed/` and `outputs/results/`.\n"
            f"- Re-run analyses with `{ana}`. This will create `{ANALYSIS_STEM}.html`, "
            "plots in `outputs/plots/` and fitted model objects in `outputs/fitted_models/`.\n"
        )
    proc = code / f"{PROCESSING_STEM}{SCRIPT_EXT}"
    ana = code / f"{ANALYSIS_STEM}{SCRIPT_EXT}"
    run_all = code / f"{RUN_ALL_STEM}{SCRIPT_EXT}"
    return (
        f"- Place raw data in `{data}/raw/`.\n"
        f"- Write processing in `{proc}` and analyses in `{ana}`.\n"
        f"- Run entire workflow with `source('{run_all}')` or run scripts individually.\n"
        "- Processing creates files in `data/processed/` and `outputs/results/`.\n"
        "- Analysis creates plots in `outputs/plots/` and fitted model objects in `outputs/fitted_models/`.\n"
    )


def render_reproducibility_body(study_names: list[str], mode: AuthoringMode) -> str:
    """Body of the README reproducibility section for a multi-study project.

    Ends with a blank line so the following heading stays separated.
    """
    listing = "".join(f"- **{name}/**\n" for name in sorted(study_names))
    placeholder = f"{STUDIES_DIR}/{{study}}"
    if mode == "literate":
        steps = (
            f"- Process data using `{placeholder}/code/{PROCESSING_STEM}{LITERATE_EXT}`\n"
            f"- Run analyses using `{placeholder}/code/{ANALYSIS_STEM}{LITERATE_EXT}`\n"
        )
    else:
        steps = (
            f"- Run entire workflow with `source('{placeholder}/code/{RUN_ALL_STEM}{SCRIPT_EXT}')`\n"
            f"- Or run individual scripts: `{PROCESSING_STEM}{SCRIPT_EXT}`, `{ANALYSIS_STEM}{SCRIPT_EXT}`\n"
        )
    return (
        "This project contains multiple studies:\n"
        "\n" + listing + "\n"
        "For each study:\n"
        f"- Place raw data in `{placeholder}/data/raw/`\n"
        f"- Document data provenance in `{placeholder}/data/README.md`\n"
        + steps
        + f"- Outputs will be created in `{placeholder}/outputs/`\n"
        "\n"
    )


def render_readme(cfg: ProjectConfig, study: StudyUnit) -> str:
    s = study.name
    return (
        f"# {cfg.project_name}\n"
        "\n"
        "## Overview\n"
        "Add aims, data sources, and reproduction steps.\n"
        "\n"
        "## Structure\n"
        "```\n"
        f"{BIBLIOGRAPHY_PATH}  # project-wide bibliography\n"
        f"{WRITEUP_DIR}/                    # thesis, manuscript, preprints, slides, etc.\n"
        f"{STUDIES_DIR}/                    # individual studies within the project\n"
        f"  {s}/\n"
        f"    code/                   # analysis and processing scripts ({_file_hint(study.authoring_mode)})\n"
        "    data/\n"
        "      README.md             # explain when, how, and by whom the data was collected\n"
        "      raw/                  # raw data and codebooks/data dictionaries (read-only)\n"
        "      processed/            # cleaned datasets and codebooks/data dictionaries\n"
        "    outputs/                # outputs of the processing and analyses scripts\n"
        "      plots/                # plots and figures, .png/.pdf/etc.\n"
        "      fitted_models/        # fitted model objects, eg from brms, lme4, lavaan, etc.\n"
        "      results/              # tables and matrices, eg descriptive stats, correlation tables\n"
        "    materials/              # measures, implementations (qualtrics, lab.js, etc.)\n"
        "    preregistration/        # preregistration documents\n"
        "LICENSE                     # suggested: CC BY 4.0\n"
        "README.md                   # this file\n"
        "```\n"
        "\n"
        f"{REPRODUCIBILITY_HEADING}\n"
        + render_single_study_reproducibility(study)
        + "\n"
        "## License\n"
        "CC BY 4.0 (see `LICENSE`).\n"
        "\n"
        "## Suggested citation\n"
        f"Authors (Year). {cfg.project_name}. URL.\n"
    )


def study_artifacts(study: StudyUnit, *, package_date: str = DEFAULT_PACKAGE_DATE) -> list[Artifact]:
    """Directories, data README and code files of one study, in creation order."""
    layout = study.layout
    out: list[Artifact] = [Artifact.directory(d) for d in layout.directories()]
    out.append(Artifact.text_file(layout.data_readme, render_data_readme()))

    ext = study.code_ext
    for stem in SCRIPT_ORDER:
        rel = layout.code_file(stem, ext)
        if study.authoring_mode == "literate":
            title = derive_title(rel, code_prefix=layout.code, ext=ext)
            out.append(Artifact.text_file(rel, render_literate_header(title, package_date=package_date)))
        else:
            out.append(Artifact.text_file(rel, render_script(stem)))
    if study.authoring_mode == "scripted":
        out.append(
            Artifact.text_file(
                layout.code_file(RUN_ALL_STEM, SCRIPT_EXT),
                render_run_all(package_date=package_date),
            )
        )
    return out


def project_artifacts(
    cfg: ProjectConfig, study: StudyUnit, *, package_date: str = DEFAULT_PACKAGE_DATE
) -> list[Artifact]:
    """Everything initialize-project materializes, in creation order."""
    top = [
        Artifact.directory(PurePosixPath(WRITEUP_DIR)),
        Artifact.directory(PurePosixPath(LITERATURE_DIR)),
        Artifact.directory(PurePosixPath(STUDIES_DIR)),
    ]
    files = [
        Artifact.text_file(cfg.project_file, render_project_file()),
        Artifact.text_file(PurePosixPath("LICENSE"), render_license()),
        Artifact.text_file(BIBLIOGRAPHY_PATH, render_bibliography()),
        Artifact.text_file(README_PATH, render_readme(cfg, study)),
        Artifact.text_file(
            PurePosixPath(".gitignore"),
            render_gitignore(ignore_large_outputs=cfg.ignore_large_outputs),
        ),
        Artifact.text_file(PurePosixPath(".gitattributes"), render_gitattributes()),
    ]
    # Study directories come before project files, study files after them.
    study_items = study_artifacts(study, package_date=package_date)
    dirs = [a for a in study_items if a.kind == "directory"]
    study_files = [a for a in study_items if a.kind == "text_file"]
    return top + dirs + files + study_files
