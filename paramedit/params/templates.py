# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Starting text for freshly created params documents."""

from __future__ import annotations

import json


def component_params_template() -> str:
	return """{
  global: {
    // User-defined global parameters; accessible to all component and environments, Ex:
    // replicas: 4,
  },
  components: {
    // Component-level parameters, defined initially when a component is generated
    // Each object below should correspond to a component in the components/ directory
  },
}
"""


def environment_params_template(component_params_path: str) -> str:
	return f"""local params = import {json.dumps(component_params_path)};
params + {{
  components +: {{
    // Insert component parameter overrides here. Ex:
    // guestbook +: {{
    //   name: "guestbook-dev",
    //   replicas: params.global.replicas,
    // }},
  }},
}}
"""


__all__ = ["component_params_template", "environment_params_template"]
