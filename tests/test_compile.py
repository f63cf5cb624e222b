from buildplan import BuildPlan, Repository
from buildplan.compile import GradleScriptCompiler


def test_build_script_matches_descriptor(android_plan, tmp_path):
    android_plan.classpath("com.google.gms:google-services:4.4.2")
    android_plan.evaluation_depends_on("app")
    c = android_plan.configure()

    script = GradleScriptCompiler(c, tmp_path / "out").render_build()

    assert script.startswith("buildscript {\n    repositories {\n        google()\n        mavenCentral()\n    }\n")
    assert '        classpath("android-gradle-plugin:8.7.3")\n' in script
    assert '        classpath("kotlin-plugin:2.1.0")\n' in script
    assert '        classpath("com.google.gms:google-services:4.4.2")\n' in script
    assert "allprojects {\n    repositories {\n        google()\n        mavenCentral()\n    }\n}\n" in script
    assert 'val customBuildDir = rootProject.layout.projectDirectory.dir("../../build")' in script
    assert '        evaluationDependsOn(":app")' in script
    assert "layout.buildDirectory.set(customBuildDir.dir(project.name))" in script
    assert 'tasks.register<Delete>("clean") {\n    delete(rootProject.layout.buildDirectory)\n}\n' in script


def test_settings_script(tmp_path):
    plan = BuildPlan("android", project_dir=tmp_path)
    plan.subproject("app")
    plan.subproject("lib", project_dir="libs/core")
    c = plan.configure()

    settings = GradleScriptCompiler(c, tmp_path / "out").render_settings()
    assert settings == (
        'rootProject.name = "android"\n'
        "\n"
        'include(":app", ":lib")\n'
        'project(":lib").projectDir = file("libs/core")\n'
    )


def test_custom_repository_and_dependency_edges(tmp_path):
    plan = BuildPlan("p", project_dir=tmp_path)
    plan.repositories("google", Repository.maven("https://example.com/$repo", name="example"))
    plan.subproject("core")
    plan.subproject("app", depends_on=["core"])
    script = GradleScriptCompiler(plan.configure(), tmp_path).render_build()

    assert '        maven { url = uri("https://example.com/\\$repo") }' in script
    assert 'project(":app") {\n    evaluationDependsOn(":core")\n}' in script


def test_compile_writes_files(android_plan, tmp_path):
    out = tmp_path / "gradle"
    written = GradleScriptCompiler(android_plan.configure(), out).compile()
    assert [p.name for p in written] == ["settings.gradle.kts", "build.gradle.kts"]
    assert (out / "build.gradle.kts").read_text().startswith("buildscript {")
    assert 'include(":app", ":lib")' in (out / "settings.gradle.kts").read_text()
