"""python-for-android build hook: registers the media browser service.

buildozer.spec points `p4a.hook` here. The generated AndroidManifest.xml has
no place for extra <service> elements, so they are spliced in after p4a
renders it and before gradle runs.
"""

from pathlib import Path

SERVICE_XML = """
    <service
        android:name="com.pxfm.app.PxfmBrowserService"
        android:exported="true">
      <intent-filter>
        <action android:name="android.media.browse.MediaBrowserService" />
      </intent-filter>
    </service>
    <meta-data
        android:name="com.google.android.gms.car.application"
        android:resource="@xml/automotive_app_desc" />
"""

AUTOMOTIVE_APP_DESC = """<?xml version="1.0" encoding="utf-8"?>
<automotiveApp>
  <uses name="media" />
</automotiveApp>
"""


def register_browser_service(dist_dir: Path) -> None:
  manifest = dist_dir / "src" / "main" / "AndroidManifest.xml"
  text = manifest.read_text(encoding="utf-8")
  if "PxfmBrowserService" not in text:
    if "</application>" not in text:
      raise RuntimeError(f"No </application> element in {manifest}")
    text = text.replace("</application>", f"{SERVICE_XML}  </application>", 1)
    manifest.write_text(text, encoding="utf-8")

  desc = dist_dir / "src" / "main" / "res" / "xml" / "automotive_app_desc.xml"
  desc.parent.mkdir(parents=True, exist_ok=True)
  desc.write_text(AUTOMOTIVE_APP_DESC, encoding="utf-8")


def after_apk_build(toolchain) -> None:
  register_browser_service(Path(toolchain._dist.dist_dir))
