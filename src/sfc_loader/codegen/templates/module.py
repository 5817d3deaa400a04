from mako.template import Template

# The script arrives split around its `export default` marker. Payloads
# (template, css, scope id) arrive already encoded as JS string literals.
MODULE_TEMPLATE = Template(
	"""${script_head}const ${binding} = ${script_tail}
;
${binding}.${template_property} = ${template_literal};
% if scope_literal is not None:
${binding}.${scope_property} = ${scope_literal};
% endif
% if css_literal is not None:
const ${binding}_style = document.createElement("style");
${binding}_style.textContent = ${css_literal};
% if scope_literal is not None:
${binding}_style.setAttribute("data-sfc-scope", ${scope_literal});
% endif
(function (component, style) {
  var instances = 0;
  var created = component.${create_hook};
  component.${create_hook} = function () {
    if (instances++ === 0) {
      document.head.appendChild(style);
    }
    if (typeof created === "function") {
      return created.apply(this, arguments);
    }
  };
  var destroyed = component.${destroy_hook};
  component.${destroy_hook} = function () {
    var result;
    if (typeof destroyed === "function") {
      result = destroyed.apply(this, arguments);
    }
    if (--instances === 0 && style.parentNode) {
      style.parentNode.removeChild(style);
    }
    return result;
  };
})(${binding}, ${binding}_style);
% endif
export default ${binding};
"""
)
